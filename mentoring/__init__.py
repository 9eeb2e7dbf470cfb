"""멘토링 강의 마켓플레이스 백엔드.

Mentoring lecture marketplace backend — lectures, point-paid enrollments,
periodic recruitment status sweep, and Kakao OAuth login.
"""
