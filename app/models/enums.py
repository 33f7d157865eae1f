import enum


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class RoomType(str, enum.Enum):
    SINGLE = "single"
    DOUBLE = "double"
    DORMITORY = "dormitory"
    SUITE = "suite"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


class PaymentMethod(str, enum.Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"
