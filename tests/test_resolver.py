# tests/test_resolver.py
"""Unit tests for query classification and lookup dispatch."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock, patch
from app.services.identifiers import normalize_plate
from app.services.resolver import plan_lookups, search_vehicle, list_student_vehicles


class TestPlanLookups:
    def test_nine_digits_is_matricula_only(self):
        assert plan_lookups("202161606") == [("matricula", "202161606")]

    def test_formatted_nine_digits(self):
        assert plan_lookups(" 2021-616-06 ") == [("matricula", "202161606")]

    def test_plate(self):
        assert plan_lookups("TNA-1234") == [("plate", "TNA-1234")]
        assert plan_lookups("tna1234") == [("plate", "TNA-1234")]

    def test_plate_with_digit_fallback(self):
        assert plan_lookups("TNA123456") == [("plate", "TNA-123456"), ("matricula", "123456")]

    def test_loose_digits_fallback(self):
        assert plan_lookups("A202161") == [("matricula", "202161")]
        assert plan_lookups("2021616") == [("matricula", "2021616")]

    def test_cleaning_matches_normalizer(self):
        # Ñ is kept so the plate lookup uses the same key the normalizer produces
        assert plan_lookups("tña 1234") == [("plate", normalize_plate("TÑA1234"))]
        assert plan_lookups("TÑA1234")[0] == ("plate", "TÑA-1234")

    @pytest.mark.parametrize("query", ["", "   ", "TNA", "TN-12", "12345", "AB-1234"])
    def test_nothing_applies(self, query):
        assert plan_lookups(query) == []


class TestSearchVehicle:
    def test_matricula_tried_before_plate_shaped_match(self):
        db = MagicMock()
        student_vehicle = MagicMock(id=1)
        with patch("app.services.resolver.find_vehicle_by_student_matricula",
                   return_value=student_vehicle) as by_matricula, \
             patch("app.services.resolver.find_vehicle_by_plate") as by_plate:
            assert search_vehicle(db, "202161606") is student_vehicle
            by_matricula.assert_called_once_with(db, "202161606")
            by_plate.assert_not_called()

    def test_plate_path(self):
        db = MagicMock()
        vehicle = MagicMock(id=7)
        with patch("app.services.resolver.find_vehicle_by_plate", return_value=vehicle) as by_plate, \
             patch("app.services.resolver.find_vehicle_by_student_matricula") as by_matricula:
            assert search_vehicle(db, "TNA-1234") is vehicle
            by_plate.assert_called_once_with(db, "TNA-1234")
            by_matricula.assert_not_called()

    def test_falls_back_to_digits_when_plate_misses(self):
        db = MagicMock()
        vehicle = MagicMock(id=3)
        with patch("app.services.resolver.find_vehicle_by_plate", return_value=None), \
             patch("app.services.resolver.find_vehicle_by_student_matricula",
                   return_value=vehicle) as by_matricula:
            assert search_vehicle(db, "TNA123456") is vehicle
            by_matricula.assert_called_once_with(db, "123456")

    def test_not_found(self):
        db = MagicMock()
        with patch("app.services.resolver.find_vehicle_by_plate", return_value=None), \
             patch("app.services.resolver.find_vehicle_by_student_matricula", return_value=None):
            assert search_vehicle(db, "TNA-1234") is None

    def test_blank_query_never_touches_storage(self):
        db = MagicMock()
        with patch("app.services.resolver.find_vehicle_by_plate") as by_plate, \
             patch("app.services.resolver.find_vehicle_by_student_matricula") as by_matricula:
            assert search_vehicle(db, "   ") is None
            by_plate.assert_not_called()
            by_matricula.assert_not_called()
        db.query.assert_not_called()

    def test_store_failure_propagates(self):
        db = MagicMock()
        with patch("app.services.resolver.find_vehicle_by_student_matricula",
                   side_effect=ConnectionError("db down")):
            with pytest.raises(ConnectionError):
                search_vehicle(db, "202161606")


class TestAgainstStore:
    def test_matricula_wins_over_plate_like_vehicle(self, db):
        from app.models.student import Student
        from app.models.vehicle import Vehicle

        owner = Student(matricula="202161606", full_name="Ana Ruiz")
        other = Student(matricula="201900001", full_name="Luis Paz")
        db.add_all([owner, other])
        db.flush()
        db.add_all([
            Vehicle(student_id=other.id, plate="202-1616", vehicle_type="carro"),
            Vehicle(student_id=owner.id, plate="TNA-1234", vehicle_type="moto"),
        ])
        db.commit()

        assert search_vehicle(db, "202161606").plate == "TNA-1234"
        assert search_vehicle(db, "tna 1234").student.matricula == "202161606"
        assert search_vehicle(db, "UXY-999") is None

    def test_student_vehicles_newest_first(self, db):
        from app.models.student import Student
        from app.models.vehicle import Vehicle

        owner = Student(matricula="202161606", full_name="Ana Ruiz")
        db.add(owner)
        db.flush()
        db.add(Vehicle(student_id=owner.id, plate="TNA-1234", vehicle_type="moto"))
        db.commit()
        db.add(Vehicle(student_id=owner.id, plate="TNB-555", vehicle_type="bici"))
        db.commit()

        plates = [v.plate for v in list_student_vehicles(db, "2021-61606")]
        assert plates == ["TNB-555", "TNA-1234"]
        assert list_student_vehicles(db, "999999999") == []
