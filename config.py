import os
import dotenv
dotenv.load_dotenv()
basedir = os.path.abspath(os.path.dirname(__file__))

# Flask configuration
SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-key-please-change-in-production'
DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
APP_NAME = 'School Timetable Generator'

# Database configuration
SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(basedir, 'timetable.db')
SQLALCHEMY_TRACK_MODIFICATIONS = False

# Insert default subjects/settings into an empty database at startup
SEED_DEFAULT_DATA = os.environ.get('SEED_DEFAULT_DATA', '1') == '1'

# Timetable generation: set to an int for reproducible tie-breaks
GENERATION_SEED = int(os.environ['GENERATION_SEED']) if os.environ.get('GENERATION_SEED') else None

# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
