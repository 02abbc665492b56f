import logging

from flask import Flask, jsonify
from models import db
from models.database import init_app as init_db
from routes import main_bp, subjects_bp, settings_bp, constraints_bp, timetables_bp
from utils.errors import TimetableError


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object('config')
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(level=app.config['LOG_LEVEL'])
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize database
    init_db(app)

    # Register blueprints
    app.register_blueprint(main_bp)
    app.register_blueprint(subjects_bp, url_prefix='/api/subjects')
    app.register_blueprint(settings_bp, url_prefix='/api/settings')
    app.register_blueprint(constraints_bp, url_prefix='/api/constraints')
    app.register_blueprint(timetables_bp, url_prefix='/api/timetables')

    register_error_handlers(app)
    register_commands(app)

    # Create tables
    with app.app_context():
        db.create_all()
        if app.config.get('SEED_DEFAULT_DATA'):
            from data.seed_data import seed_defaults
            if seed_defaults():
                app.logger.info("Seeded default subjects and settings")

    @app.after_request
    def add_header(response):
        """Add headers to prevent caching."""
        response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        response.headers['Pragma'] = 'no-cache'
        response.headers['Expires'] = '0'
        return response

    return app


def register_error_handlers(app):
    @app.errorhandler(TimetableError)
    def handle_timetable_error(error):
        app.logger.warning(f"Rejected request: {error}")
        return jsonify({'error': str(error)}), 400

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'error': 'Not found'}), 404


def register_commands(app):
    @app.cli.command('seed-db')
    def seed_db_command():
        """Replace all data with the default subjects and settings."""
        from data.seed_data import seed_database
        seed_database()
        print("Database seeded successfully!")


if __name__ == '__main__':
    app = create_app()
    app.run(debug=app.config['DEBUG'], port=5000)
