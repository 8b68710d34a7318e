# portal_notifications/services/notification_events.py
"""
Рассылка уведомлений по доменным событиям портала.

Каждое событие превращается в одно уведомление на каждого получателя:
новые задания, тесты и материалы уходят всем студентам, сдачи работ и
результаты тестов уходят всем преподавателям, оценка уходит одному студенту.
"""
import logging
from sqlalchemy.orm import Session

from portal_notifications.crud import notification as crud_notification
from portal_notifications.crud import profile as crud_profile
from portal_notifications.schemas.notification import NotificationType

logger = logging.getLogger(__name__)

STUDENT_ROLE = "student"
TEACHER_ROLE = "teacher"


def _notify_role(
    db: Session,
    role: str,
    type: NotificationType,
    title: str,
    message: str,
    related_id: str | None = None,
) -> int:
    recipient_ids = crud_profile.get_profile_ids_by_role(db, role)
    if not recipient_ids:
        logger.info(f"No recipients with role '{role}' for '{type.value}' notification.")
        return 0

    created = crud_notification.create_notifications_for_users(
        db,
        user_ids=recipient_ids,
        type=type.value,
        title=title,
        message=message,
        related_id=related_id,
    )
    logger.info(f"Created {created} '{type.value}' notifications for role '{role}'.")
    return created


def notify_assignment_posted(db: Session, assignment_id: str, assignment_title: str, subject_name: str) -> int:
    return _notify_role(
        db, STUDENT_ROLE, NotificationType.ASSIGNMENT,
        title="New Assignment Posted",
        message=f'A new assignment "{assignment_title}" has been posted for {subject_name}.',
        related_id=assignment_id,
    )


def notify_test_published(db: Session, test_id: str, test_title: str, subject_name: str) -> int:
    return _notify_role(
        db, STUDENT_ROLE, NotificationType.TEST,
        title="New Test Available",
        message=f'A new test "{test_title}" is now available for {subject_name}.',
        related_id=test_id,
    )


def notify_assignment_submitted(db: Session, assignment_id: str, assignment_title: str, student_name: str) -> int:
    return _notify_role(
        db, TEACHER_ROLE, NotificationType.SUBMISSION,
        title="New Assignment Submission",
        message=f'{student_name} has submitted an assignment for "{assignment_title}".',
        related_id=assignment_id,
    )


def notify_assignment_graded(db: Session, student_id: str, assignment_title: str, grade: int) -> int:
    """Оценка адресована одному студенту, поэтому рассылки по роли нет."""
    crud_notification.create_notification(
        db,
        user_id=student_id,
        type=NotificationType.GRADE.value,
        title="Assignment Graded",
        message=f'Your assignment "{assignment_title}" has been graded. You received {grade}/100.',
    )
    logger.info(f"Created grade notification for student {student_id}.")
    return 1


def notify_course_material_uploaded(db: Session, material_id: str, material_title: str, subject_name: str) -> int:
    return _notify_role(
        db, STUDENT_ROLE, NotificationType.COURSE_MATERIAL,
        title="New Course Material Available",
        message=f'New course material "{material_title}" has been uploaded for {subject_name}.',
        related_id=material_id,
    )


def notify_test_completed(
    db: Session,
    test_id: str,
    test_title: str,
    student_name: str,
    score: int,
    total_questions: int,
) -> int:
    return _notify_role(
        db, TEACHER_ROLE, NotificationType.TEST_COMPLETION,
        title="Test Completed",
        message=f'{student_name} has completed the test "{test_title}" with a score of {score}/{total_questions}.',
        related_id=test_id,
    )
