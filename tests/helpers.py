"""Payload builders and recording fakes shared by the tests."""
from clinic_booking.services.realtime import EventSink


class RecordingSink(EventSink):
    def __init__(self):
        self.events = []

    def emit(self, event, payload):
        self.events.append((event, payload))

    def names(self):
        return [name for name, _ in self.events]


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def send(self, message):
        self.messages.append(message)


def outpatient(date="2025-04-01", time="10:00", **extra):
    return {"reservationType": "outpatient", "date": date, "time": time,
            "patientName": "Taro Yamada", "patientId": "1001", **extra}


def visit(date="2025-04-01", start="10:00", end="10:30", **extra):
    return {"reservationType": "visit", "date": date, "startTimeRange": start,
            "endTimeRange": end, "facilityName": "Sakura Home", **extra}


def rehab(date="2025-04-01", start="09:30", end="10:00", **extra):
    return {"reservationType": "rehab", "date": date, "startTimeRange": start, "endTimeRange": end, **extra}


def special(date="2025-04-01", time="10:00", **extra):
    return {"reservationType": "special", "date": date, "time": time,
            "patientName": "Hanako Sato", "reason": "Follow-up", **extra}
