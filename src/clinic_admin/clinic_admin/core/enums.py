from __future__ import annotations

from enum import Enum


class EntityType(str, Enum):
    """Loại đối tượng có thể lưu trữ (archive)."""

    PATIENT = "patients"
    EMPLOYEE = "employees"

    @property
    def label(self) -> str:
        return "patient" if self is EntityType.PATIENT else "employee"


class EntityStatus(str, Enum):
    """Trạng thái hồ sơ bệnh nhân/nhân viên lấy từ API."""

    ACTIVE = "active"
    LEAVE = "leave"
    INACTIVE = "inactive"


class NotificationLevel(str, Enum):
    """Mức thông báo hiển thị cho người dùng (flash categories)."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
