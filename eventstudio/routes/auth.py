from flask import Blueprint, jsonify
from flask_jwt_extended import current_user, jwt_required

from eventstudio.routes import get_json_body
from eventstudio.security import attach_session_cookie, clear_session_cookie, issue_session_token
from eventstudio.services.auth_service import authenticate_user, register_user, update_profile

auth_bp = Blueprint('auth', __name__)


def _session_response(user, message, status_code):
    token = issue_session_token(user)
    response = jsonify({
        'success': True,
        'message': message,
        'token': token,
        'user': user.to_dict(),
    })
    response.status_code = status_code
    return attach_session_cookie(response, token)


@auth_bp.route('/register', methods=['POST'])
def register():
    """
    Register a new user
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
            - email
            - password
            - role
          properties:
            name:
              type: string
            email:
              type: string
            password:
              type: string
            role:
              type: string
              enum: [user, admin]
    responses:
      201:
        description: User registered, session cookie set
      400:
        description: Missing or invalid fields, or email already registered
    """
    user = register_user(get_json_body())
    return _session_response(user, 'User registered successfully', 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Authenticate user and start a session
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - email
            - password
          properties:
            email:
              type: string
            password:
              type: string
    responses:
      200:
        description: Login successful
      401:
        description: Invalid password
      404:
        description: No user with that email
    """
    user = authenticate_user(get_json_body())
    return _session_response(user, 'Login successful', 200)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """
    Clear the session cookie
    ---
    tags:
      - Auth
    responses:
      200:
        description: Logout successful
    """
    response = jsonify({'success': True, 'message': 'Logout successful'})
    return clear_session_cookie(response)


@auth_bp.route('/profile', methods=['GET'])
@jwt_required()
def get_profile():
    """
    Get the authenticated user's profile
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: User profile
      401:
        description: Not authenticated
    """
    return jsonify({'success': True, 'user': current_user.to_profile()}), 200


@auth_bp.route('/update-profile', methods=['PUT'])
@jwt_required()
def put_profile():
    """
    Update analytics profile attributes
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            age:
              type: string
              enum: ["18-24", "25-34", "35-44", "45+"]
            gender:
              type: string
            location:
              type: string
            interests:
              type: array
              items:
                type: string
    responses:
      200:
        description: Profile updated
      400:
        description: Value outside the allowed vocabulary
    """
    user = update_profile(current_user, get_json_body())
    return jsonify({
        'success': True,
        'message': 'Profile updated successfully',
        'user': user.to_profile(),
    }), 200
