"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Pre-configured HTTPException subclasses for the domain error kinds, so a
host application can surface them with the right status code while
services raise them without specifying status codes at each call site.

Usage:
    from mentoring.utils.exceptions import NotFoundError, InsufficientFundsError
    raise NotFoundError("Mentee not found")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a mentor, mentee, lecture, enrollment or company does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class MentorNotFoundError(NotFoundError):
    """강의 생성 시 멘토가 존재하지 않을 때 사용하는 404 예외.

    Specialization of NotFoundError raised by lecture creation.
    """

    def __init__(self, mentor_id: object) -> None:
        super().__init__(f"Mentor not found with ID: {mentor_id}")
        self.mentor_id = mentor_id


class InsufficientFundsError(HTTPException):
    """402 Payment Required 예외 — 포인트 잔액이 수강료보다 적을 때 사용.

    Raised when a mentee's point balance is below the lecture fee.

    Args:
        mentee_name: 멘티 이름 (Mentee name)
        lecture_title: 강의 제목 (Lecture title)
    """

    def __init__(self, mentee_name: str, lecture_title: str) -> None:
        super().__init__(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail=(
                f"Not enough points of mentee '{mentee_name}' "
                f"to enroll in lecture '{lecture_title}'"
            ),
        )


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    Raised when a uniqueness rule would be violated
    (e.g. a mentee enrolling twice in the same lecture).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class LectureFullError(HTTPException):
    """409 Conflict 예외 — 강의 정원이 모두 찬 경우."""

    def __init__(self, lecture_title: str, capacity: int) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Lecture '{lecture_title}' is full (capacity {capacity})",
        )


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Raised when a bearer credential is missing, invalid, or expired.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class ExternalServiceError(HTTPException):
    """502 Bad Gateway 예외 — 외부 OAuth 제공자 호출 실패.

    Raised when the identity provider answers with a non-success status,
    an unparsable body, or cannot be reached. Never retried.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "External service error") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
