import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from classsync.core import errors
from classsync.core.config import settings
from classsync.database.assignment_repo import AssignmentRepo
from classsync.database.notification_repo import NotificationRepo
from classsync.database.submission_repo import SubmissionRepo
from classsync.database.user_repo import UserRepo
from classsync.schemas.assignment import Assignment
from classsync.schemas.common import Page
from classsync.schemas.context import UserContext
from classsync.schemas.notification import NotificationType, RelatedType
from classsync.schemas.submission import (
    FeedbackUpdate,
    Submission,
    SubmissionCreate,
    SubmissionFilter,
    SubmissionStatus,
    SubmissionUpdate,
)
from classsync.schemas.user import Role
from classsync.services.access_policy import Action, Resource, enforce, require_role, submission_window_open
from classsync.services.notification_service import NotificationService
from classsync.services.summaries import assignment_summaries, user_summaries

logger = logging.getLogger("classsync.submissions")


def create_submission_id() -> str:
    return f"sb-{uuid.uuid4().hex[:12]}"


def derive_status(due_date: datetime, submitted_at: datetime) -> SubmissionStatus:
    """Stato calcolato una sola volta, al momento della scrittura."""
    return SubmissionStatus.LATE if submitted_at > due_date else SubmissionStatus.SUBMITTED


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _allow_late(allow_late: Optional[bool]) -> bool:
    return settings.allow_late_submissions if allow_late is None else allow_late


class SubmissionService:

    @staticmethod
    async def create_submission(
        data: SubmissionCreate,
        user: UserContext,
        repo: SubmissionRepo,
        assignments: AssignmentRepo,
        notifications: NotificationRepo,
        now: Optional[datetime] = None,
        allow_late: Optional[bool] = None,
    ) -> Submission:
        require_role(user, Role.STUDENT)
        enforce(user, Action.CREATE, Resource.SUBMISSION)

        assignment = await assignments.find_one(data.assignmentId)
        if not assignment or not assignment.isActive:
            raise errors.NotFound("Assignment not found or inactive")

        now = now or _now()
        if not submission_window_open(assignment.dueDate, now, _allow_late(allow_late)):
            raise errors.ValidationError("Assignment is overdue and cannot be submitted")

        if await repo.find_for_pair(assignment.id, user.user_id):
            raise errors.Conflict("You have already submitted this assignment")

        submission = Submission(
            id=create_submission_id(),
            assignmentId=assignment.id,
            studentId=user.user_id,
            status=derive_status(assignment.dueDate, now),
            submittedAt=now,
            files=data.files,
            text=data.text,
            createdAt=now,
            updatedAt=now,
        )
        # l'indice unico (assignmentId, studentId) copre la corsa tra due richieste
        await repo.create(submission)

        # la consegna è già salvata: un errore sulle notifiche non la annulla
        try:
            await NotificationService.notify(
                notifications, [assignment.createdBy],
                title="New submission",
                message=f"A student submitted '{assignment.title}'",
                type_=NotificationType.ASSIGNMENT,
                related_id=submission.id,
                related_type=RelatedType.SUBMISSION,
            )
        except Exception:
            logger.exception("Notifica consegna %s fallita", submission.id)
        return submission

    @staticmethod
    async def update_submission(
        submission_id: str,
        data: SubmissionUpdate,
        user: UserContext,
        repo: SubmissionRepo,
        assignments: AssignmentRepo,
        now: Optional[datetime] = None,
        allow_late: Optional[bool] = None,
    ) -> Submission:
        submission = await repo.find_one(submission_id)
        if not submission:
            raise errors.NotFound("Submission not found")
        if user.role is not Role.STUDENT:
            raise errors.Forbidden("Access denied. Student role required.")
        enforce(
            user, Action.UPDATE, Resource.SUBMISSION, owner_id=submission.studentId,
            message="Access denied. You can only update your own submissions.",
        )

        assignment = await assignments.find_one(submission.assignmentId)
        if not assignment:
            raise errors.NotFound("Assignment not found")
        now = now or _now()
        if not submission_window_open(assignment.dueDate, now, _allow_late(allow_late)):
            raise errors.ValidationError("Cannot update submission after due date")

        fields: Dict[str, Any] = {
            "submittedAt": now,
            "status": derive_status(assignment.dueDate, now),
            "updatedAt": now,
        }
        if data.text is not None:
            fields["text"] = data.text
        if data.files:
            fields["files"] = data.files
        updated = await repo.update(submission_id, fields)
        if updated is None:
            raise errors.NotFound("Submission not found")
        return updated

    @staticmethod
    async def set_feedback(
        submission_id: str,
        data: FeedbackUpdate,
        user: UserContext,
        repo: SubmissionRepo,
        assignments: AssignmentRepo,
        notifications: NotificationRepo,
    ) -> Submission:
        require_role(user, Role.TEACHER, Role.ADMIN)
        submission = await repo.find_one(submission_id)
        if not submission:
            raise errors.NotFound("Submission not found")
        assignment = await assignments.find_one(submission.assignmentId)
        if not assignment:
            raise errors.NotFound("Assignment not found")
        enforce(
            user, Action.UPDATE, Resource.SUBMISSION, owner_id=assignment.createdBy,
            message="Access denied. You can only review submissions of your own assignments.",
        )
        # lo stato non cambia: il feedback non è una nuova consegna
        updated = await repo.update(submission_id, {"feedback": data.feedback.strip(), "updatedAt": _now()})
        if updated is None:
            raise errors.NotFound("Submission not found")

        try:
            await NotificationService.notify(
                notifications, [submission.studentId],
                title="Feedback available",
                message=f"Your submission for '{assignment.title}' received feedback",
                type_=NotificationType.ASSIGNMENT,
                related_id=submission.id,
                related_type=RelatedType.SUBMISSION,
            )
        except Exception:
            logger.exception("Notifica feedback %s fallita", submission.id)
        return updated

    @staticmethod
    async def get_submission(
        submission_id: str,
        user: UserContext,
        repo: SubmissionRepo,
        assignments: AssignmentRepo,
    ) -> Submission:
        submission = await repo.find_one(submission_id)
        if not submission:
            raise errors.NotFound("Submission not found")
        if user.role is Role.TEACHER:
            assignment = await assignments.find_one(submission.assignmentId)
            enforce(user, Action.READ, Resource.SUBMISSION, owner_id=assignment.createdBy if assignment else None)
        else:
            enforce(user, Action.READ, Resource.SUBMISSION, owner_id=submission.studentId)
        return submission

    @staticmethod
    async def list_submissions(
        user: UserContext,
        repo: SubmissionRepo,
        assignments: AssignmentRepo,
        page: Page,
        status: Optional[SubmissionStatus] = None,
    ) -> Tuple[Sequence[Submission], int]:
        """Vista dipendente dal ruolo: admin tutto, teacher i propri assignment, student le proprie."""
        enforce(user, Action.LIST, Resource.SUBMISSION)
        filt = SubmissionFilter(status=status)
        if user.role is Role.TEACHER:
            filt = filt.model_copy(update={"assignmentIds": await assignments.ids_for_teacher(user.user_id)})
        elif user.role is Role.STUDENT:
            filt = filt.model_copy(update={"studentId": user.user_id})
        items = await repo.find(filt, skip=page.skip, limit=page.limit)
        total = await repo.count(filt)
        return items, total

    @staticmethod
    async def list_my_submissions(
        user: UserContext,
        repo: SubmissionRepo,
        assignments: AssignmentRepo,
        page: Page,
    ) -> Tuple[List[Dict[str, Any]], int]:
        filt = SubmissionFilter(studentId=user.user_id)
        items = await repo.find(filt, skip=page.skip, limit=page.limit)
        total = await repo.count(filt)
        summaries = await assignment_summaries(assignments, [s.assignmentId for s in items])
        out = []
        for s in items:
            row = s.model_dump()
            row["assignment"] = summaries.get(s.assignmentId)
            out.append(row)
        return out, total

    @staticmethod
    async def list_for_assignment(
        assignment_id: str,
        user: UserContext,
        repo: SubmissionRepo,
        assignments: AssignmentRepo,
        page: Page,
        status: Optional[SubmissionStatus] = None,
    ) -> Tuple[Assignment, Sequence[Submission], int]:
        assignment = await assignments.find_one(assignment_id)
        if not assignment:
            raise errors.NotFound("Assignment not found")

        filt = SubmissionFilter(assignmentId=assignment.id, status=status)
        if user.role is Role.STUDENT:
            # uno studente vede solo la propria consegna
            filt = filt.model_copy(update={"studentId": user.user_id})
        else:
            enforce(user, Action.READ, Resource.SUBMISSION, owner_id=assignment.createdBy)

        items = await repo.find(filt, skip=page.skip, limit=page.limit)
        total = await repo.count(filt)
        return assignment, items, total

    @staticmethod
    async def list_all(
        user: UserContext,
        repo: SubmissionRepo,
        assignments: AssignmentRepo,
        users: UserRepo,
        page: Page,
        status: Optional[SubmissionStatus] = None,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Vista admin: filtro sullo stato salvato (submitted/late)."""
        require_role(user, Role.ADMIN)
        filt = SubmissionFilter(status=status)
        items = await repo.find(filt, skip=page.skip, limit=page.limit)
        total = await repo.count(filt)

        a_map = await assignment_summaries(assignments, [s.assignmentId for s in items])
        u_map = await user_summaries(users, [s.studentId for s in items])
        out = []
        for s in items:
            row = s.model_dump()
            row["assignment"] = a_map.get(s.assignmentId)
            row["student"] = u_map.get(s.studentId)
            out.append(row)
        return out, total
