"""Thin proxy routes over the Spotify Web API (token + playlist lookup)."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from src.domain.catalog import CatalogError, CredentialProvider, PlaylistResolver

logger = logging.getLogger(__name__)

spotify_bp = Blueprint('spotify_bp', __name__, url_prefix='/api/spotify')


def _credentials() -> CredentialProvider:
    return current_app.extensions['credential_provider']


def _resolver() -> PlaylistResolver:
    return current_app.extensions['playlist_resolver']


@spotify_bp.route('/token', methods=['GET'])
def get_token():
    try:
        token = _credentials().get_token()
    except Exception as exc:
        logger.error("Error getting Spotify access token: %s", exc, exc_info=not isinstance(exc, CatalogError))
        return jsonify({'error': 'Failed to get access token'}), 500
    return jsonify({'access_token': token.value}), 200


@spotify_bp.route('/playlist', methods=['GET'])
def get_playlist():
    url = (request.args.get('url') or '').strip()
    if not url:
        return jsonify({'error': 'Playlist URL is required'}), 400

    try:
        playlist = _resolver().resolve(url)
    except CatalogError as exc:
        logger.warning("Playlist lookup failed (%s): %s", exc.status_code, exc.message)
        return jsonify({'error': exc.message}), exc.status_code
    except Exception:
        logger.exception("Unexpected error fetching playlist")
        return jsonify({'error': 'An unexpected error occurred'}), 500

    return jsonify(playlist), 200


__all__ = ['spotify_bp']
