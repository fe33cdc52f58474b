# app/errors.py
"""
Domain exceptions raised by the services.
Validation problems and not-found lookups are return values, not exceptions;
these cover the cases a caller cannot continue from.
"""


class AccessControlError(Exception):
    """Base class for errors raised by the access-control services."""


class VehicleNotFoundError(AccessControlError):
    def __init__(self, vehicle_id: int):
        super().__init__(f"Vehicle {vehicle_id} does not exist")
        self.vehicle_id = vehicle_id


class DuplicatePlateError(AccessControlError):
    def __init__(self, plate: str):
        super().__init__(f"Plate {plate} already registered")
        self.plate = plate


class GuardNotFoundError(AccessControlError):
    def __init__(self, guard_id: int):
        super().__init__(f"Guard {guard_id} does not exist")
        self.guard_id = guard_id


class DuplicateEmailError(AccessControlError):
    def __init__(self, email: str):
        super().__init__(f"Email {email} already in use")
        self.email = email


class GuardRoleError(AccessControlError):
    """Operation only allowed on accounts with role 'guard' (admins are protected)."""
