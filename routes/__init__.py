from .main import main_bp
from .subjects import subjects_bp
from .settings import settings_bp
from .constraints import constraints_bp
from .timetables import timetables_bp

__all__ = ['main_bp', 'subjects_bp', 'settings_bp', 'constraints_bp', 'timetables_bp']
