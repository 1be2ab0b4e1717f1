"""
Attendance ledger: students, class days and attendance percentages.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from recordstore.config import Settings
from recordstore.domain.models import AttendanceStatus, Student, classify_attendance
from recordstore.errors import NotFound
from recordstore.ledgers.abstract import AbstractLedger
from recordstore.store import RecordStore
from recordstore.utils.logging import get_logger

log = get_logger(__name__)


class AttendanceLedger(AbstractLedger):
    """
    Students keyed by student ID, plus the number of class days held so far.

    A student registered after some class days starts with those days in
    `total_classes` and none attended.
    """

    name: str = "attendance"
    description: str = "Student register with per-class attendance and percentages."
    filename: str = "attendance_data.txt"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__(settings)
        self.students: RecordStore[Student] = RecordStore(
            Student, "student", capacity=self.settings.attendance_capacity
        )
        self._class_days = 0

    @property
    def counter(self) -> int:
        return self._class_days

    @counter.setter
    def counter(self, value: int) -> None:
        self._class_days = int(value)

    @property
    def total_class_days(self) -> int:
        return self._class_days

    def stores(self) -> Dict[str, RecordStore[Any]]:
        return {"students": self.students}

    def register_student(self, key: int, name: str) -> Student:
        student = self.students.insert(
            key, name=name, total_classes=self._class_days, attended_classes=0
        )
        log.info(f"[STUDENT REGISTERED] {key}", extra={"key": key})
        return student

    def mark_attendance(self, key: int, present: bool) -> Student:
        student = self.students.get(key)
        student.total_classes += 1
        if present:
            student.attended_classes += 1
        log.info(f"[ATTENDANCE] {key}", extra={"key": key, "present": present})
        return student

    def mark_class(self, present_keys: Iterable[int]) -> int:
        """
        Hold one class day: listed students are present, everyone else absent.

        Unknown keys are rejected before anyone is marked. Returns the class
        day number; with no students registered nothing changes.
        """
        present = set(present_keys)
        for key in present:
            if key not in self.students:
                raise NotFound(self.students.entity, key)
        if len(self.students) == 0:
            log.warning("[CLASS SKIPPED] no students registered")
            return self._class_days

        for student in self.students:
            student.total_classes += 1
            if student.key in present:
                student.attended_classes += 1
        self._class_days += 1
        log.info(
            f"[CLASS DAY {self._class_days}] marked",
            extra={"present": len(present), "students": len(self.students)},
        )
        return self._class_days

    def percentage(self, key: int) -> float:
        return self.students.get(key).attendance_percentage

    def status(self, key: int) -> AttendanceStatus:
        return self._classify(self.students.get(key))

    def summary(self) -> Dict[AttendanceStatus, int]:
        counts = {status: 0 for status in AttendanceStatus}
        for student in self.students:
            counts[self._classify(student)] += 1
        return counts

    def _classify(self, student: Student) -> AttendanceStatus:
        return classify_attendance(
            student.attendance_percentage,
            self.settings.attendance_good_threshold,
            self.settings.attendance_low_threshold,
        )


__all__ = ["AttendanceLedger"]
