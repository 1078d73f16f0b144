from flask import Blueprint, jsonify, request, current_app
from snakeboard import socketio
from snakeboard.services.errors import ServerFault
from snakeboard.services.leaderboard import get_leaderboard
from snakeboard.services.replay import get_rules
from snakeboard.services.tickets import TicketAuthority, sanitize_name
from snakeboard.services.verification import (
    MalformedSubmission,
    VerificationPolicy,
    parse_submission,
    verify_submission,
)
import time


api = Blueprint('api', __name__)


@api.after_request
def _no_store(response):
    response.headers['Cache-Control'] = 'no-store'
    return response


def _authority() -> TicketAuthority:
    return TicketAuthority(current_app.config.get('SESSION_HMAC_SECRET'))


def _server_fault(tag: str, exc: Exception):
    current_app.logger.error(f"[{tag}] {type(exc).__name__}: {exc}")
    return jsonify({'ok': False, 'reason': 'server error'}), 500


def _broadcast_top5(top5) -> None:
    socketio.emit('leaderboard_update', {'top5': top5}, to='leaderboard', namespace='/ws')


@api.route('/session/new', methods=['POST'])
def new_session():
    data = request.get_json(silent=True, force=True)
    if data is None:
        if request.get_data():
            return jsonify({'error': 'Bad request'}), 400
        data = {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Bad request'}), 400

    name = sanitize_name(data.get('name'))
    try:
        ticket = _authority().issue(name)
    except ServerFault as exc:
        return _server_fault('session-error', exc)
    current_app.logger.info(f"[session] name={name} session={ticket.sessionId}")
    return jsonify(ticket.to_dict())


@api.route('/submit', methods=['POST'])
def submit_run():
    try:
        submission = parse_submission(request.get_json(silent=True, force=True))
    except MalformedSubmission as exc:
        current_app.logger.info(f"[submit-malformed] {exc}")
        return jsonify({'ok': False, 'reason': 'bad request'}), 400

    try:
        result = verify_submission(
            submission,
            _authority(),
            get_leaderboard,
            VerificationPolicy.from_config(current_app.config),
            now_ms=int(time.time() * 1000),
            rules=get_rules(current_app.config.get('RULES_VERSION')),
        )
    except ServerFault as exc:
        return _server_fault('submit-error', exc)

    if not result['ok']:
        current_app.logger.info(
            f"[submit-reject] name={submission.name} session={submission.session_id} reason={result['reason']}"
        )
        return jsonify(result)

    current_app.logger.info(
        f"[submit] name={submission.name} score={result['verifiedScore']} ticks={submission.tick_count}"
    )
    _broadcast_top5(result['top5'])
    return jsonify(result)


@api.route('/top5', methods=['GET'])
def get_top5():
    try:
        top5 = get_leaderboard().top()
    except ServerFault as exc:
        return _server_fault('top5-error', exc)
    return jsonify({'ok': True, 'top5': top5})


@api.route('/rules', methods=['GET'])
def get_rule_set():
    try:
        rules = get_rules(current_app.config.get('RULES_VERSION'))
    except ServerFault as exc:
        return _server_fault('rules-error', exc)
    return jsonify(rules.to_dict())
