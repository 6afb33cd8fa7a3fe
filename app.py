import logging
from flask import Flask, jsonify
from config import Config
from extensions import db, login_manager, migrate
from utils.errors import register_error_handlers

def create_app(config_class=Config):
    # Create and configure the app
    app = Flask(__name__)
    app.config.from_object(config_class)
    config_class.init_app(app)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)  # Initialize Flask-Migrate

    # JSON error responses for every blueprint
    register_error_handlers(app)

    # Import User model here to avoid circular imports
    from models.user import User

    # Configure login manager
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({
            'status': 'error',
            'message': 'Authentication required'
        }), 401

    # Register blueprints
    from routes.auth import auth_bp
    from routes.journal import journal_bp
    from routes.moods import moods_bp
    from routes.tasks import tasks_bp
    from routes.appointments import appointments_bp
    from routes.study import study_bp
    from routes.resources import resources_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(journal_bp, url_prefix='/api/journal')
    app.register_blueprint(moods_bp, url_prefix='/api/moods')
    app.register_blueprint(tasks_bp, url_prefix='/api/tasks')
    app.register_blueprint(appointments_bp, url_prefix='/api/appointments')
    app.register_blueprint(study_bp, url_prefix='/api/study')
    app.register_blueprint(resources_bp, url_prefix='/api/resources')

    # Create database tables
    with app.app_context():
        db.create_all()

    return app

if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)
