"""
REST API implementation for Studium using FastAPI.
"""

import threading
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from pydantic import BaseModel, Field

from fastapi import FastAPI, HTTPException, status

from .. import __version__
from ..core.course import Course
from ..core.directory import Directory
from ..core.enums import Capability
from ..core.exceptions import (
    StudiumException, ValidationError, AuthorizationError, DuplicateUsernameError,
    InvalidCredentialsError, AlreadyEnrolledError, NotEnrolledError, ResourceNotFoundError
)
from ..core.grading import GradingStrategy
from ..core.users import User, require_capability


# Pydantic models for API
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1, max_length=20)


class UserResponse(BaseModel):
    id: str
    name: str
    username: str
    role: str
    enrolled_courses: List[str] = []
    created_at: datetime
    updated_at: datetime
    version: int


class LoginRequest(BaseModel):
    username: str
    password: str


class CourseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=1000)
    teacher_id: str = Field(..., min_length=1)
    grading_strategy: Optional[str] = Field(None, pattern=r'^(unweighted_mean|weighted_mean)$')


class CourseResponse(BaseModel):
    id: str
    name: str
    description: str
    teacher_id: str
    grading_strategy: str
    enrolled_students: List[str] = []
    created_at: datetime
    updated_at: datetime
    version: int


class DescriptionUpdate(BaseModel):
    teacher_id: str = Field(..., min_length=1)
    description: str = Field(..., max_length=1000)


class StrategyUpdate(BaseModel):
    teacher_id: str = Field(..., min_length=1)
    grading_strategy: str = Field(..., pattern=r'^(unweighted_mean|weighted_mean)$')


class EnrollmentRequest(BaseModel):
    student_id: str = Field(..., min_length=1)


class GradeCreate(BaseModel):
    teacher_id: str = Field(..., min_length=1)
    student_id: str = Field(..., min_length=1)
    grade: float
    weight: float = Field(1.0, ge=0)


class GradeResponse(BaseModel):
    student_id: str
    course_id: str
    grade: float
    weight: float


class FinalGradeResponse(BaseModel):
    student_id: str
    course_id: str
    grading_strategy: str
    final_grade: float


class CourseResult(BaseModel):
    course: str
    final_grade: float


class StatisticsResponse(BaseModel):
    success: bool
    message: str
    statistics: Dict[str, Any]


_STATUS_BY_ERROR = [
    (DuplicateUsernameError, status.HTTP_409_CONFLICT),
    (AlreadyEnrolledError, status.HTTP_409_CONFLICT),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotEnrolledError, status.HTTP_404_NOT_FOUND),
    (ResourceNotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
]


def to_http_error(error: StudiumException) -> HTTPException:
    """Translate a core error into the matching HTTP error."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=error.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)


class StudiumRestAPI:
    """REST API over a Directory."""
    
    def __init__(self, directory: Directory):
        self._directory = directory
        self._lock = threading.RLock()
        
        self.app = FastAPI(
            title="Studium API",
            description="Academic record keeper: users, courses, enrollment and grades",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc"
        )
        
        self._setup_routes()
    
    def _setup_routes(self):
        """Setup API routes."""
        directory = self._directory
        
        @self.app.get("/", response_model=Dict[str, str])
        async def root():
            return {
                "message": "Studium API",
                "version": __version__,
                "docs": "/docs"
            }
        
        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}
        
        # User endpoints
        @self.app.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
        async def register_user(user_data: UserCreate):
            """Register a new user."""
            try:
                with self._lock:
                    user = directory.register_user(
                        user_data.role, user_data.name, user_data.username, user_data.password
                    )
                    return self._user_to_response(user)
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.post("/login", response_model=UserResponse)
        async def login(credentials: LoginRequest):
            try:
                with self._lock:
                    user = directory.authenticate(credentials.username, credentials.password)
                    return self._user_to_response(user)
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.get("/users", response_model=List[UserResponse])
        async def list_users(actor_id: str):
            """List all users; the actor must be an administrator."""
            try:
                with self._lock:
                    actor = directory.get_user(actor_id)
                    return [self._user_to_response(user) for user in directory.view_all_users(actor)]
            except StudiumException as e:
                raise to_http_error(e)
        
        # Course endpoints
        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        async def create_course(course_data: CourseCreate):
            """Create a course owned by a teacher."""
            try:
                with self._lock:
                    teacher = directory.get_user(course_data.teacher_id)
                    require_capability(teacher, Capability.CREATE_COURSE)
                    strategy = (GradingStrategy.parse(course_data.grading_strategy)
                                if course_data.grading_strategy else None)
                    course = directory.create_course(
                        course_data.name, course_data.description, teacher, strategy
                    )
                    return self._course_to_response(course)
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.get("/courses", response_model=List[CourseResponse])
        async def list_courses(skip: int = 0, limit: int = 100):
            with self._lock:
                courses = directory.all_courses()[skip:skip + limit]
                return [self._course_to_response(course) for course in courses]
        
        @self.app.get("/courses/{course_id}", response_model=CourseResponse)
        async def get_course(course_id: str):
            try:
                with self._lock:
                    return self._course_to_response(directory.get_course(course_id))
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.put("/courses/{course_id}/description", response_model=CourseResponse)
        async def update_description(course_id: str, update: DescriptionUpdate):
            """Change the description and notify enrolled students."""
            try:
                with self._lock:
                    course = directory.get_course(course_id)
                    teacher = directory.get_user(update.teacher_id)
                    directory.update_course_description(course, update.description, actor=teacher)
                    return self._course_to_response(course)
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.put("/courses/{course_id}/grading-strategy", response_model=CourseResponse)
        async def update_grading_strategy(course_id: str, update: StrategyUpdate):
            try:
                with self._lock:
                    course = directory.get_course(course_id)
                    course.require_owner(directory.get_user(update.teacher_id), Capability.EDIT_COURSE)
                    course.set_grading_strategy(GradingStrategy.parse(update.grading_strategy))
                    return self._course_to_response(course)
            except StudiumException as e:
                raise to_http_error(e)
        
        # Enrollment and grading endpoints
        @self.app.post("/courses/{course_id}/enrollments", response_model=CourseResponse,
                       status_code=status.HTTP_201_CREATED)
        async def enroll_student(course_id: str, enrollment: EnrollmentRequest):
            try:
                with self._lock:
                    course = directory.get_course(course_id)
                    student = directory.get_user(enrollment.student_id)
                    course.register_student(student)
                    return self._course_to_response(course)
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.get("/courses/{course_id}/students", response_model=List[UserResponse])
        async def list_enrolled_students(course_id: str):
            try:
                with self._lock:
                    course = directory.get_course(course_id)
                    return [self._user_to_response(student) for student in course.enrolled_students()]
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.post("/courses/{course_id}/grades", response_model=GradeResponse,
                       status_code=status.HTTP_201_CREATED)
        async def add_grade(course_id: str, grade_data: GradeCreate):
            try:
                with self._lock:
                    course = directory.get_course(course_id)
                    teacher = directory.get_user(grade_data.teacher_id)
                    student = directory.get_user(grade_data.student_id)
                    entry = directory.record_grade(teacher, course, student,
                                                   grade_data.grade, grade_data.weight)
                    return GradeResponse(
                        student_id=student.id,
                        course_id=course.id,
                        grade=entry.grade,
                        weight=entry.weight
                    )
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.get("/courses/{course_id}/students/{student_id}/final-grade",
                      response_model=FinalGradeResponse)
        async def get_final_grade(course_id: str, student_id: str):
            try:
                with self._lock:
                    course = directory.get_course(course_id)
                    student = directory.get_user(student_id)
                    return FinalGradeResponse(
                        student_id=student.id,
                        course_id=course.id,
                        grading_strategy=course.grading_strategy.value,
                        final_grade=course.final_grade(student)
                    )
            except StudiumException as e:
                raise to_http_error(e)
        
        # Per-user views
        @self.app.get("/teachers/{teacher_id}/courses", response_model=List[CourseResponse])
        async def list_teacher_courses(teacher_id: str):
            try:
                with self._lock:
                    teacher = directory.get_user(teacher_id)
                    return [self._course_to_response(course)
                            for course in directory.courses_taught_by(teacher)]
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.get("/students/{student_id}/results", response_model=List[CourseResult])
        async def get_student_results(student_id: str):
            try:
                with self._lock:
                    student = directory.get_user(student_id)
                    require_capability(student, Capability.VIEW_RESULTS)
                    return [CourseResult(course=name, final_grade=grade)
                            for name, grade in directory.student_results(student)]
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.get("/students/{student_id}/notifications", response_model=List[str])
        async def get_student_notifications(student_id: str):
            try:
                with self._lock:
                    student = directory.get_user(student_id)
                    if not student.is_student:
                        raise ValidationError("Only students receive notifications")
                    return student.inbox
            except StudiumException as e:
                raise to_http_error(e)
        
        @self.app.get("/statistics", response_model=StatisticsResponse)
        async def get_statistics():
            with self._lock:
                return StatisticsResponse(
                    success=True,
                    message="Statistics retrieved successfully",
                    statistics=directory.get_statistics()
                )
    
    def _user_to_response(self, user: User) -> UserResponse:
        """Convert a User to its response model."""
        return UserResponse(
            id=user.id,
            name=user.name,
            username=user.username,
            role=user.role.value,
            enrolled_courses=[course.id for course in user.enrolled_courses],
            created_at=user.created_at,
            updated_at=user.updated_at,
            version=user.version
        )
    
    def _course_to_response(self, course: Course) -> CourseResponse:
        """Convert a Course to its response model."""
        return CourseResponse(
            id=course.id,
            name=course.name,
            description=course.description,
            teacher_id=course.teacher.id,
            grading_strategy=course.grading_strategy.value,
            enrolled_students=[student.id for student in course.enrolled_students()],
            created_at=course.created_at,
            updated_at=course.updated_at,
            version=course.version
        )
