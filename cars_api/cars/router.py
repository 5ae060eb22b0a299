import logging
from pathlib import Path as FilePath
from typing import Annotated

from fastapi import APIRouter, Body, Depends, File, HTTPException, Path, Query, UploadFile

from cars_api.auth.router import get_current_user
from cars_api.cars import store
from cars_api.cars.uploads import ImageRejected, image_url_for, read_image, save_image
from cars_api.cars.validation import SQLITE_INT_MAX, SQLITE_INT_MIN, normalize_car, validate_car
from cars_api.config import settings
from cars_api.errors import store_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cars", tags=["cars"], dependencies=[Depends(get_current_user)])

MAX_PAGE = 1_000_000

CarId = Annotated[int, Path(ge=1, le=SQLITE_INT_MAX)]


def _year_filter(alias: str):
    return Query(None, alias=alias, ge=SQLITE_INT_MIN, le=SQLITE_INT_MAX)


def _not_found(car_id: int) -> HTTPException:
    return HTTPException(404, {"error": "Car not found", "message": f"No car with id {car_id}"})


def _checked_car(payload: dict) -> dict:
    violations = validate_car(payload)
    if violations:
        raise HTTPException(
            400,
            {"error": "Invalid data", "errors": [v.as_dict() for v in violations]},
        )
    return normalize_car(payload)


@router.get("")
def list_cars(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=1000),
    sort_by: str | None = Query(None, alias="sortBy"),
    order: str | None = None,
):
    with store_errors("Error while fetching cars"):
        cars, column, direction = store.list_cars(page, limit, sort_by, order)
    return {
        "success": True,
        "message": "Car list retrieved",
        "page": page,
        "limit": limit,
        "sortBy": column,
        "order": direction,
        "count": len(cars),
        "data": cars,
    }


@router.get("/search")
def search_cars(
    brand: str | None = None,
    model: str | None = None,
    min_year: int | None = _year_filter("minYear"),
    max_year: int | None = _year_filter("maxYear"),
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    category: str | None = None,
):
    filters = store.SearchFilters(
        brand=brand,
        model=model,
        min_year=min_year,
        max_year=max_year,
        min_price=min_price,
        max_price=max_price,
        category=category,
    )
    with store_errors("Error while searching cars"):
        cars = store.search_cars(filters)
    return {"success": True, "message": "Search completed", "count": len(cars), "data": cars}


@router.get("/favorites")
def favorite_cars():
    with store_errors("Error while fetching favorite cars"):
        cars = store.favorite_cars()
    return {"success": True, "message": "Favorite cars", "count": len(cars), "data": cars}


@router.get("/{car_id}")
def get_car(car_id: CarId):
    with store_errors("Server error"):
        car = store.get_car(car_id)
    if not car:
        raise _not_found(car_id)
    return {"success": True, "message": "Car found", "data": car}


@router.post("", status_code=201)
def create_car(payload: dict = Body(...), user: dict = Depends(get_current_user)):
    car = _checked_car(payload)
    with store_errors("Error while creating the car"):
        created = store.create_car(car)
    logger.info(f"Car {created['id']} created by '{user['username']}'")
    return {"success": True, "message": "Car created", "data": created}


@router.put("/{car_id}")
def update_car(
    car_id: CarId,
    payload: dict = Body(...),
    user: dict = Depends(get_current_user),
):
    car = _checked_car(payload)
    with store_errors("Error while updating the car"):
        updated = store.update_car(car_id, car)
    if updated is None:
        raise _not_found(car_id)
    logger.info(f"Car {car_id} updated by '{user['username']}'")
    return {"success": True, "message": "Car updated", "data": updated}


@router.post("/{car_id}/upload")
def upload_car_image(
    car_id: CarId,
    car_image: UploadFile | None = File(None, alias="carImage"),
    user: dict = Depends(get_current_user),
):
    try:
        content, extension = read_image(car_image)
    except ImageRejected as e:
        logger.warning(f"Rejected image for car {car_id}: {e}")
        raise HTTPException(400, str(e))

    with store_errors("Error while updating the car"):
        if store.get_car(car_id) is None:
            raise _not_found(car_id)
        name = save_image(content, extension, settings.upload_dir)
        image_url = image_url_for(name)
        attached = store.set_image_url(car_id, image_url)

    if not attached:
        # Car was deleted after the lookup
        (FilePath(settings.upload_dir) / name).unlink(missing_ok=True)
        raise _not_found(car_id)

    logger.info(f"Image {name} attached to car {car_id} by '{user['username']}'")
    return {"success": True, "message": "Image uploaded", "data": {"id": car_id, "image_url": image_url}}


@router.delete("/{car_id}")
def delete_car(car_id: CarId, user: dict = Depends(get_current_user)):
    with store_errors("Error while deleting the car"):
        deleted = store.delete_car(car_id)
    if not deleted:
        raise _not_found(car_id)
    logger.info(f"Car {car_id} deleted by '{user['username']}'")
    return {"success": True, "message": "Car deleted", "data": {"id": car_id}}
