from flask import Flask
from flask_cors import CORS
from marshmallow import ValidationError
import logging
from logging.handlers import RotatingFileHandler
import os

from .config import config, UNDERSIZED_LOT_POLICIES
from .utils.errors import IncompleteMeasurementError, InvalidInputError
from .routes.quality import quality_bp, validation_error_response

def create_app(config_name='default'):
    """Application factory function"""

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    if app.config['UNDERSIZED_LOT_POLICY'] not in UNDERSIZED_LOT_POLICIES:
        raise ValueError(
            f"UNDERSIZED_LOT_POLICY must be one of {UNDERSIZED_LOT_POLICIES}, "
            f"got {app.config['UNDERSIZED_LOT_POLICY']!r}"
        )

    # Initialize logging
    if not app.debug and not app.testing:
        log_dir = app.config['LOG_DIR']
        if not os.path.exists(log_dir):
            os.mkdir(log_dir)
        file_handler = RotatingFileHandler(os.path.join(log_dir, 'garment_qc.log'), maxBytes=10240, backupCount=10)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        app.logger.setLevel(logging.INFO)
        app.logger.info('Garment QC engine startup')

    # Initialize CORS
    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    # Register blueprints
    app.register_blueprint(quality_bp)

    # Health check endpoint
    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return {
            'status': 'healthy',
            'message': 'Garment QC engine is running',
            'version': '1.0.0'
        }

    # Error handlers
    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        app.logger.warning(f'Rejected payload: {error.messages}')
        return validation_error_response(error)

    @app.errorhandler(InvalidInputError)
    def handle_invalid_input(error):
        app.logger.warning(f'Invalid input: {error.message}')
        return {
            'success': False,
            'message': error.message,
            'error': 'INVALID_INPUT',
            'field': error.field
        }, 400

    @app.errorhandler(IncompleteMeasurementError)
    def handle_incomplete(error):
        return {
            'success': False,
            'message': 'Please enter all actual measurements before completing',
            'error': 'INCOMPLETE_MEASUREMENTS',
            'pending': error.point_ids
        }, 409

    @app.errorhandler(404)
    def not_found(error):
        return {
            'success': False,
            'message': 'Endpoint not found',
            'error': 'NOT_FOUND'
        }, 404

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f'Server Error: {error}')
        return {
            'success': False,
            'message': 'Internal server error',
            'error': 'INTERNAL_ERROR'
        }, 500

    return app
