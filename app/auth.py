from flask import Blueprint, jsonify, request
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf
from app.data.core.user_info.user import User
from app import login_manager, limiter
from app.logger import get_logger

logger = get_logger("stock_ledger.auth")
auth = Blueprint('auth', __name__)


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'kind': 'unauthorized', 'message': 'Login required'}), 401


@auth.route('/csrf-token', methods=['GET'])
def csrf_token():
    return jsonify({'csrf_token': generate_csrf()})


@auth.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    if current_user.is_authenticated:
        logger.debug(f"User {current_user.username} already authenticated")
        return jsonify({'id': current_user.id, 'username': current_user.username, 'role': current_user.role})

    data = request.get_json(silent=True) or request.form
    username = data.get('username')
    password = data.get('password')

    logger.debug(f"Login attempt for username: {username}")

    if not username or not password:
        logger.warning(f"Login attempt with missing credentials for username: {username}")
        return jsonify({'kind': 'validation', 'message': 'Please enter both username and password'}), 400

    user = User.query.filter_by(username=username).first()

    if user is None or not user.check_password(password):
        logger.warning(f"Failed login attempt for username: {username}")
        return jsonify({'kind': 'unauthorized', 'message': 'Invalid username or password'}), 401

    if not user.is_active:
        logger.warning(f"Login attempt for disabled account: {username}")
        return jsonify({'kind': 'unauthorized', 'message': 'Account is disabled'}), 401

    login_user(user)
    logger.info(f"Successful login for user: {username}")
    return jsonify({'id': user.id, 'username': user.username, 'role': user.role})


@auth.route('/logout')
@login_required
def logout():
    username = current_user.username
    logout_user()
    logger.info(f"User logged out: {username}")
    return jsonify({'message': 'Logged out'})
