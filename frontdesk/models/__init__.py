from .category import Category
from .room import Room, RoomStatus
from .booking import Booking, BookingExtension
from .housekeeping import HousekeepingTask, TaskStatus, OPEN_TASK_STATUSES
from .cash_transaction import CashTransaction, CashType, CashSource
