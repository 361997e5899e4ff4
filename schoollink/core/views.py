"""
Telas (views) da aplicação.
"""

from enum import Enum
from typing import Optional

from .models import Role


class View(str, Enum):
    INITIAL_ROLE_CHOICE = 'InitialRoleChoice'
    LOGIN = 'Login'
    TEACHER_DASHBOARD = 'TeacherDashboard'
    STUDENT_DASHBOARD = 'StudentDashboard'
    EVENT_CALENDAR = 'EventCalendar'
    EVENT_DETAILS = 'EventDetails'
    ADD_EVENT = 'AddEvent'
    ADD_SCORES = 'AddScores'
    VIEW_RESULTS = 'ViewResults'
    NOTICE_BOARD = 'NoticeBoard'
    STUDENT_PROFILE = 'StudentProfile'


def dashboard_for(role: Optional[Role]) -> View:
    """Painel inicial do papel; sem papel, volta para a escolha de papel."""
    if role == Role.TEACHER:
        return View.TEACHER_DASHBOARD
    if role == Role.STUDENT:
        return View.STUDENT_DASHBOARD
    return View.INITIAL_ROLE_CHOICE
