from __future__ import annotations

import json

from trip_planner.schemas import TripRequest


def _quoted(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def build_prompt(req: TripRequest) -> str:
    """Render the generation instruction for one trip request.

    Pure: the same request always yields the same text. Request values that land
    inside the JSON template are JSON-quoted so the template stays parseable.
    """
    days = req.number_of_days
    return (
        f"Generate a detailed {days}-day travel itinerary for {req.country}.\n"
        f"Budget: {req.budget}\n"
        f"Travel Style: {req.travel_style}\n"
        f"Interests: {req.interests}\n"
        f"Group Type: {req.group_type}\n"
        "\n"
        "Return only JSON, in this exact format:\n"
        "{\n"
        '  "name": "A descriptive title for the trip",\n'
        '  "description": "A brief description of the trip and its highlights not exceeding 100 words",\n'
        '  "estimatedPrice": "Lowest average price for the trip in USD, e.g.$price",\n'
        f'  "duration": {days},\n'
        f'  "budget": {_quoted(req.budget)},\n'
        f'  "travelStyle": {_quoted(req.travel_style)},\n'
        f'  "interests": {_quoted(req.interests)},\n'
        f'  "groupType": {_quoted(req.group_type)},\n'
        '  "bestTimeToVisit": [\n'
        '    "🌸 Season (from month to month): reason to visit",\n'
        '    "☀️ Season (from month to month): reason to visit",\n'
        '    "🍁 Season (from month to month): reason to visit",\n'
        '    "❄️ Season (from month to month): reason to visit"\n'
        "  ],\n"
        '  "weatherInfo": [\n'
        '    "☀️ Season: temperature range in Celsius (temperature range in Fahrenheit)",\n'
        '    "🌦️ Season: temperature range in Celsius (temperature range in Fahrenheit)",\n'
        '    "🌧️ Season: temperature range in Celsius (temperature range in Fahrenheit)",\n'
        '    "❄️ Season: temperature range in Celsius (temperature range in Fahrenheit)"\n'
        "  ],\n"
        '  "location": {\n'
        '    "city": "name of the city or region",\n'
        '    "coordinates": [latitude, longitude],\n'
        '    "openStreetMap": "link to open street map"\n'
        "  },\n"
        '  "itinerary": [\n'
        "    {\n"
        '      "day": 1,\n'
        '      "location": "City/Region Name",\n'
        '      "activities": [\n'
        '        {"time": "Morning", "description": "🏰 Visit the local historic castle and enjoy a scenic walk"},\n'
        '        {"time": "Afternoon", "description": "🖼️ Explore a famous art museum with a guided tour"},\n'
        '        {"time": "Evening", "description": "🍷 Dine at a rooftop restaurant with local wine"}\n'
        "      ]\n"
        "    },\n"
        "    ...\n"
        "  ]\n"
        "}\n"
        f"The itinerary must contain exactly {days} entries, one per day."
    )
