from cars_api.cars.validation import CAR_RULES, normalize_car, validate_car


def fields(violations):
    return [v.field for v in violations]


def test_valid_minimal_car():
    assert validate_car({"brand": "Ford", "model": "Mustang", "year": 1965}) == []


def test_missing_year_is_reported():
    violations = validate_car({"brand": "Test", "model": "TestModel"})
    assert fields(violations) == ["year"]


def test_all_violations_collected_in_rule_order():
    payload = {
        "brand": "",
        "model": "   ",
        "year": 1700,
        "price": "cheap",
        "mileage": -5,
        "color": 12,
        "favorite": "maybe",
        "image_url": "not a url",
    }
    assert fields(validate_car(payload)) == [
        "brand",
        "model",
        "year",
        "price",
        "mileage",
        "color",
        "favorite",
        "image_url",
    ]


def test_violation_carries_message_and_value():
    violation = validate_car({"brand": "A", "model": "B", "year": 3000})[0]
    assert violation.as_dict() == {
        "field": "year",
        "message": violation.message,
        "value": 3000,
    }
    assert "1886" in violation.message


def test_year_bounds_are_inclusive():
    assert validate_car({"brand": "Benz", "model": "Patent-Motorwagen", "year": 1886}) == []
    assert validate_car({"brand": "X", "model": "Y", "year": 2030}) == []
    assert fields(validate_car({"brand": "X", "model": "Y", "year": 1885})) == ["year"]
    assert fields(validate_car({"brand": "X", "model": "Y", "year": 2031})) == ["year"]


def test_numeric_strings_accepted():
    payload = {"brand": "X", "model": "Y", "year": "1995", "price": "1999.5", "mileage": "1200"}
    assert validate_car(payload) == []


def test_booleans_are_not_numbers():
    violations = validate_car({"brand": "X", "model": "Y", "year": True, "price": False})
    assert fields(violations) == ["year", "price"]


def test_null_optional_fields_are_skipped():
    payload = {"brand": "X", "model": "Y", "year": 2000, "price": None, "image_url": None}
    assert validate_car(payload) == []


def test_favorite_accepts_bool_and_flags():
    for value in (True, False, 0, 1, "true", "false", "0", "1"):
        assert validate_car({"brand": "X", "model": "Y", "year": 2000, "favorite": value}) == []
    assert fields(validate_car({"brand": "X", "model": "Y", "year": 2000, "favorite": 2})) == ["favorite"]


def test_image_url_forms():
    base = {"brand": "X", "model": "Y", "year": 2000}
    assert validate_car({**base, "image_url": "https://example.com/car.png"}) == []
    assert validate_car({**base, "image_url": "/uploads/1700000000000-ab12cd34.png"}) == []
    assert fields(validate_car({**base, "image_url": "ftp//broken"})) == ["image_url"]
    assert fields(validate_car({**base, "image_url": "http://nohost"})) == ["image_url"]


def test_every_rule_targets_a_known_field():
    assert [r.field for r in CAR_RULES] == [
        "brand",
        "model",
        "year",
        "price",
        "mileage",
        "color",
        "description",
        "favorite",
        "category",
        "image_url",
    ]


def test_normalize_car_coerces_types():
    car = normalize_car(
        {"brand": " Ford ", "model": "GT40", "year": "1966", "price": "100", "mileage": "10", "favorite": "1"}
    )
    assert car["brand"] == "Ford"
    assert car["year"] == 1966
    assert car["price"] == 100.0
    assert car["mileage"] == 10
    assert car["favorite"] is True
    assert car["color"] is None


def test_normalize_car_defaults_favorite_to_false():
    assert normalize_car({"brand": "A", "model": "B", "year": 2000})["favorite"] is False


def test_price_that_overflows_float_is_rejected():
    base = {"brand": "X", "model": "Y", "year": 2000}
    assert fields(validate_car({**base, "price": "1" + "0" * 400})) == ["price"]
    assert fields(validate_car({**base, "price": 10**400})) == ["price"]
    assert fields(validate_car({**base, "price": float("inf")})) == ["price"]
    assert fields(validate_car({**base, "price": float("nan")})) == ["price"]


def test_integers_must_fit_an_sqlite_column():
    base = {"brand": "X", "model": "Y", "year": 2000}
    assert validate_car({**base, "mileage": 2**63 - 1}) == []
    assert fields(validate_car({**base, "mileage": 2**63})) == ["mileage"]
    assert fields(validate_car({**base, "mileage": 10**20})) == ["mileage"]
    assert fields(validate_car({**base, "mileage": "9" * 5000})) == ["mileage"]
    assert fields(validate_car({**base, "mileage": 1e300})) == ["mileage"]
