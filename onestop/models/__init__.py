from onestop.models.library import Book, BookCategory, BookCopy, BookLoan
from onestop.models.room import Room
from onestop.models.room_booking import BookingLog, BookingSchedule, RoomBooking
from onestop.models.travel_request import TravelRequest
from onestop.models.vehicle_request import VehicleRequest

__all__ = [
    "Book",
    "BookCategory",
    "BookCopy",
    "BookLoan",
    "BookingLog",
    "BookingSchedule",
    "Room",
    "RoomBooking",
    "TravelRequest",
    "VehicleRequest",
]
