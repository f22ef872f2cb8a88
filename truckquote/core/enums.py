from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"

    def __str__(self):
        return self.value


class TruckType(str, Enum):
    FOUR_TON = "4-ton"

    def __str__(self):
        return self.value

    @property
    def label(self) -> str:
        return TRUCK_LABELS[self]


TRUCK_LABELS = {
    TruckType.FOUR_TON: "4 Ton Truck",
}


class QuoteStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    ACCEPTED = "accepted"
    DECLINED = "declined"

    def __str__(self):
        return self.value


class AuditAction(str, Enum):
    REGISTER = "register"
    LOGIN = "login"
    UPDATE_SETTINGS = "update_settings"
    UPDATE_QUOTE_STATUS = "update_quote_status"
    REQUOTE = "requote"

    def __str__(self):
        return self.value
