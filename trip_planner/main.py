from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from trip_planner.config import Settings, get_settings
from trip_planner.countries import CountryResolver
from trip_planner.generation import GenerationClient
from trip_planner.images import ImageEnricher
from trip_planner.persistence import TripPersister
from trip_planner.schemas import AccountProfile, Country
from trip_planner.store import AppwriteDocumentStore, DocumentStore, InMemoryDocumentStore
from trip_planner.trips import TripCatalog
from trip_planner.users import UserDirectory
from trip_planner.workflow import TripPipeline


app = FastAPI(title="Trip Planner", version="0.1.0")
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("trip-planner")


@dataclass
class Services:
    countries: CountryResolver
    images: ImageEnricher
    store: DocumentStore
    pipeline: TripPipeline
    trips: TripCatalog
    users: UserDirectory

    async def aclose(self) -> None:
        await self.countries.aclose()
        await self.images.aclose()
        await self.store.aclose()


def build_services(settings: Settings) -> Services:
    if settings.appwrite_configured:
        store: DocumentStore = AppwriteDocumentStore(
            endpoint=settings.appwrite_endpoint,
            project_id=settings.appwrite_project_id,
            api_key=settings.appwrite_api_key,
            database_id=settings.appwrite_database_id,
            timeout=settings.store_timeout_sec,
        )
    else:
        logger.warning("document store not configured, trips are kept in memory")
        store = InMemoryDocumentStore()

    generator = GenerationClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        temperature=settings.generation_temperature,
        top_p=settings.generation_top_p,
        timeout_sec=settings.llm_timeout_sec,
    )
    images = ImageEnricher(settings.unsplash_access_key, timeout=settings.image_timeout_sec)

    return Services(
        countries=CountryResolver(settings.country_api_endpoints, timeout=settings.country_timeout_sec),
        images=images,
        store=store,
        pipeline=TripPipeline(generator, images, TripPersister(store, settings.trip_collection_id)),
        trips=TripCatalog(store, settings.trip_collection_id),
        users=UserDirectory(store, settings.user_collection_id),
    )


def _services() -> Services:
    return app.state.services


@app.on_event("startup")
async def on_startup() -> None:
    app.state.services = build_services(get_settings())


@app.on_event("shutdown")
async def on_shutdown() -> None:
    services: Services | None = getattr(app.state, "services", None)
    if services is not None:
        await services.aclose()


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get("/api/countries", response_model=list[Country])
async def countries() -> list[Country]:
    return await _services().countries.resolve()


@app.post("/api/create-trip")
async def create_trip(request: Request) -> JSONResponse:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    result = await _services().pipeline.run(payload)
    status = 200 if result.ok else 500
    return JSONResponse(status_code=status, content=result.to_response())


@app.get("/api/trips")
async def list_trips(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_id: str | None = Query(None, alias="userId"),
) -> dict:
    trips, total = await _services().trips.list_trips(limit=limit, offset=offset, user_id=user_id)
    return {"trips": [t.model_dump() for t in trips], "total": total}


@app.get("/api/trips/{trip_id}")
async def get_trip(trip_id: str):
    trip = await _services().trips.get_trip(trip_id)
    if trip is None:
        return JSONResponse(status_code=404, content={"error": "trip_not_found"})
    return trip


@app.get("/api/users")
async def list_users(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> dict:
    users, total = await _services().users.get_all_users(limit, offset)
    return {"users": users, "total": total}


@app.post("/api/users")
async def ensure_user(account: AccountProfile) -> dict:
    return await _services().users.ensure_user(account)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc)})


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
