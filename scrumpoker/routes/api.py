"""
REST API endpoints for the Scrum Poker presence service.
"""

import logging
from flask import Blueprint, jsonify, request

from scrumpoker.handlers.player_handler import PlayerHandler

logger = logging.getLogger(__name__)


def _json_response(result):
    return jsonify(result.body), result.status_code


def create_api_blueprint(player_handler=None):
    """Create and configure the API Blueprint with its handler."""
    player_handler = player_handler or PlayerHandler()

    api = Blueprint('api', __name__)

    @api.route('/health')
    def health():
        return {'status': 'healthy'}

    @api.route('/player', methods=['POST'])
    def join():
        """Register a participant in a room."""
        return _json_response(player_handler.handle_join(request.get_json(silent=True)))

    @api.route('/players')
    def list_players():
        """List participants, optionally filtered by room."""
        return _json_response(player_handler.handle_list_participants(
            request.args.get('roomName'),
            request.args.get('roomSecret'),
        ))

    @api.route('/vote', methods=['POST'])
    def vote():
        """Submit a vote and notify the voter's room."""
        return _json_response(player_handler.handle_vote(request.get_json(silent=True)))

    return api
