"""
Knife Hit Feedback Layer.

Event emission for sound, haptics and popups.
"""

from src.feedback.events import EventBus, EventPayload, EventRecorder, FeedbackEvent

__all__ = [
    "EventBus",
    "EventPayload",
    "EventRecorder",
    "FeedbackEvent",
]
