from __future__ import annotations

from src.cma.normalizer import build_subject_property

from .builders import cma_record


def test_placeholder_subject_uses_cma_name() -> None:
    subject = build_subject_property(cma_record(subject=None, name="77 Lake Dr"))
    assert subject["address"] == subject["unparsedAddress"] == subject["streetAddress"]
    assert subject["address"] == "77 Lake Dr"
    assert subject["beds"] == subject["baths"] == subject["sqft"] == 0
    assert subject["listPrice"] == 0
    assert subject["standardStatus"] == "Active"
    assert subject["mlsNumber"] == ""
    assert subject["photos"] == []


def test_placeholder_subject_without_name() -> None:
    subject = build_subject_property({"subjectProperty": None})
    assert subject["address"] == "Subject Property"
    assert build_subject_property(None)["address"] == "Subject Property"


def test_subject_uses_same_field_rules_as_comparables() -> None:
    raw = {
        "address": "12 Bay St",
        "bedroomsTotal": "3",
        "bathroomsTotal": 2,
        "sqft": "1,700",
        "standardStatus": "SC",
        "coordinates": {"latitude": 30.2, "longitude": -97.7},
        "yearBuilt": 1998,
    }
    subject = build_subject_property(cma_record(subject=raw))
    assert subject["address"] == "12 Bay St"
    assert subject["beds"] == 3
    assert subject["baths"] == 2
    assert subject["sqft"] == subject["livingArea"] == 1700
    assert subject["standardStatus"] == "Pending"
    assert subject["map"] == {"latitude": 30.2, "longitude": -97.7}
    assert subject["yearBuilt"] == 1998


def test_subject_last_status_wins() -> None:
    raw = {"address": "5 Hill Rd", "status": "Active", "lastStatus": "Lsd"}
    subject = build_subject_property(cma_record(subject=raw))
    assert subject["status"] == subject["standardStatus"] == "Leasing"


def test_subject_drops_raw_aliases_for_canonical_numbers() -> None:
    raw = {
        "address": "8 Elm Ct",
        "bedrooms": "3",
        "price": "450000",
        "lotSize": "0.5",
        "lat": "30.1",
        "lng": "-97.6",
        "dom": "12",
        "yearBuilt": 2004,
    }
    subject = build_subject_property(cma_record(subject=raw))
    for key in ("bedrooms", "price", "lotSize", "lat", "lng", "dom"):
        assert key not in subject
    assert subject["beds"] == 3
    assert subject["listPrice"] == 450000
    assert subject["lotSizeAcres"] == 0.5
    assert subject["daysOnMarket"] == 12
    assert subject["map"] == {"latitude": 30.1, "longitude": -97.6}
    assert subject["yearBuilt"] == 2004
    for key in ("listPrice", "beds", "baths", "sqft", "daysOnMarket", "lotSizeAcres"):
        assert isinstance(subject[key], int | float)
        assert not isinstance(subject[key], bool)


def test_placeholder_and_normalized_subject_share_keys() -> None:
    placeholder = build_subject_property(cma_record(subject=None))
    normalized = build_subject_property(cma_record(subject={"address": "8 Elm Ct"}))
    assert set(placeholder) == set(normalized)
