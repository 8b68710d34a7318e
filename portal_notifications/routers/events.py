# portal_notifications/routers/events.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal_notifications.dependencies import get_db
from portal_notifications.schemas.notification import (
    AssignmentGradedEvent, AssignmentPostedEvent, AssignmentSubmittedEvent,
    CourseMaterialUploadedEvent, EventFanOutResult, TestCompletedEvent, TestPublishedEvent,
)
from portal_notifications.services import notification_events

# Внутренние эндпоинты: их вызывают другие сервисы портала, когда происходит доменное событие
events_router = APIRouter()

@events_router.post("/assignment-posted", response_model=EventFanOutResult)
def assignment_posted(event: AssignmentPostedEvent, db: Session = Depends(get_db)):
    created = notification_events.notify_assignment_posted(
        db, event.assignment_id, event.assignment_title, event.subject_name
    )
    return EventFanOutResult(created=created)

@events_router.post("/test-published", response_model=EventFanOutResult)
def test_published(event: TestPublishedEvent, db: Session = Depends(get_db)):
    created = notification_events.notify_test_published(
        db, event.test_id, event.test_title, event.subject_name
    )
    return EventFanOutResult(created=created)

@events_router.post("/assignment-submitted", response_model=EventFanOutResult)
def assignment_submitted(event: AssignmentSubmittedEvent, db: Session = Depends(get_db)):
    created = notification_events.notify_assignment_submitted(
        db, event.assignment_id, event.assignment_title, event.student_name
    )
    return EventFanOutResult(created=created)

@events_router.post("/assignment-graded", response_model=EventFanOutResult)
def assignment_graded(event: AssignmentGradedEvent, db: Session = Depends(get_db)):
    created = notification_events.notify_assignment_graded(
        db, event.student_id, event.assignment_title, event.grade
    )
    return EventFanOutResult(created=created)

@events_router.post("/course-material-uploaded", response_model=EventFanOutResult)
def course_material_uploaded(event: CourseMaterialUploadedEvent, db: Session = Depends(get_db)):
    created = notification_events.notify_course_material_uploaded(
        db, event.material_id, event.material_title, event.subject_name
    )
    return EventFanOutResult(created=created)

@events_router.post("/test-completed", response_model=EventFanOutResult)
def test_completed(event: TestCompletedEvent, db: Session = Depends(get_db)):
    created = notification_events.notify_test_completed(
        db, event.test_id, event.test_title, event.student_name, event.score, event.total_questions
    )
    return EventFanOutResult(created=created)
