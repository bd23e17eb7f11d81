# backend/app.py
import os
import logging
from datetime import datetime, timezone

from flask import Flask, request, jsonify, make_response
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from config import Settings
from services.cache import ResponseCache
from services.errors import (
    InvalidRequest,
    RequestTimeout,
    UpstreamConnectionError,
    UpstreamError,
    WeatherServiceError,
)
from services.location import LocationService, DEFAULT_LIMIT
from services.provider import OpenWeatherClient
from services.weather import LocationQuery, WeatherService

logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO'),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

API_NAME = 'CoatCheck API'
API_VERSION = '1.0'


def error_response(message, status, code):
    return jsonify({
        'error': message,
        'code': code
    }), status


def service_error_response(error: WeatherServiceError, action: str):
    if isinstance(error, UpstreamError):
        # Upstream body stays in the logs; the client only gets the status.
        message = f"Error {action}: {error.status_code}"
    elif isinstance(error, RequestTimeout):
        message = 'The request timed out. Check your internet connection.'
    elif isinstance(error, UpstreamConnectionError):
        message = 'Connection error. Check your internet connection.'
    elif isinstance(error, InvalidRequest):
        message = str(error)
    else:
        logger.error(f"Error {action}: {error}")
        message = f"Error {action}: {error}"
    return error_response(message, error.status_code, error.code)


def create_app(settings=None, cache=None, client=None):
    settings = settings or Settings.from_env()
    cache = cache if cache is not None else ResponseCache(ttl=settings.cache_ttl_seconds)
    client = client or OpenWeatherClient(settings)

    weather_service = WeatherService(client, cache)
    location_service = LocationService(client)

    app = Flask(__name__)
    app.json.sort_keys = False
    app.config['RATELIMIT_ENABLED'] = settings.rate_limit_enabled
    app.extensions['weather_cache'] = cache

    CORS(app, resources={r"/api/*": {"origins": settings.cors_origins}})

    limiter = Limiter(
        app=app,
        key_func=get_remote_address,
        default_limits=settings.rate_limits,
        storage_uri="memory://"
    )
    app.extensions["rate_limiter"] = limiter

    @app.route('/api/geocoding', methods=['GET'])
    @limiter.limit("100 per minute", override_defaults=False)
    def geocoding():
        query = request.args.get('query')
        limit = request.args.get('limit', DEFAULT_LIMIT)

        try:
            limit = int(limit)
        except (TypeError, ValueError):
            return error_response("'limit' must be a positive integer", 400, 'INVALID_REQUEST')

        try:
            results = location_service.search(query, limit)
        except WeatherServiceError as e:
            return service_error_response(e, 'searching cities')
        except Exception as e:
            logger.exception(f"Geocoding error: {e}")
            return error_response(f"Error searching cities: {e}", 500, 'INTERNAL_ERROR')

        return jsonify([result.to_dict() for result in results]), 200

    @app.route('/api/weather', methods=['GET'])
    @limiter.limit("100 per minute", override_defaults=False)
    def weather():
        try:
            query = LocationQuery.from_params(
                request.args.get('lat'),
                request.args.get('lon'),
                request.args.get('city'),
            )
            payload, cache_hit = weather_service.lookup(query)
        except WeatherServiceError as e:
            return service_error_response(e, 'fetching weather data')
        except Exception as e:
            logger.exception(f"Weather API error: {e}")
            return error_response(f"Error fetching weather data: {e}", 500, 'INTERNAL_ERROR')

        response = make_response(jsonify(payload), 200)
        response.headers['X-Cache'] = 'HIT' if cache_hit else 'MISS'
        return response

    @app.route('/', methods=['GET'])
    @limiter.exempt
    def home():
        return jsonify({
            'name': API_NAME,
            'version': API_VERSION,
            'endpoints': [
                '/api/geocoding?query=<name>&limit=<n>',
                '/api/weather?lat=<lat>&lon=<lon>',
                '/api/weather?city=<name>'
            ]
        }), 200

    @app.route('/health', methods=['GET'])
    @limiter.exempt
    def health_check():
        return jsonify({
            'status': 'healthy',
            'cached_locations': len(cache),
            'timestamp': datetime.now(timezone.utc).isoformat()
        }), 200

    @app.errorhandler(404)
    def not_found(error):
        return error_response('Endpoint not found', 404, 'NOT_FOUND')

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response('Method not allowed', 405, 'METHOD_NOT_ALLOWED')

    @app.errorhandler(429)
    def ratelimit_handler(e):
        return error_response('Rate limit exceeded', 429, 'RATE_LIMITED')

    @app.errorhandler(500)
    def internal_error(error):
        logger.exception(f"Internal server error: {error}")
        return error_response('Internal server error', 500, 'INTERNAL_ERROR')

    return app


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('FLASK_ENV') == 'development'
    settings = Settings.from_env()

    logger.info("=" * 60)
    logger.info(f"{API_NAME} v{API_VERSION}")
    logger.info("=" * 60)
    logger.info(f"Server: Running on port {port}")
    logger.info(f"Upstream: {settings.base_url}")
    logger.info(f"Cache TTL: {settings.cache_ttl_seconds}s (in-process)")
    logger.info("=" * 60)

    create_app(settings).run(host='0.0.0.0', port=port, debug=debug)
