import logging
from datetime import datetime
from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, current_user
from models.user import User
from extensions import db
from forms import LoginForm, RegistrationForm
from utils.errors import error_response, form_error_response
from utils.helpers import login_required_api

logger = logging.getLogger(__name__)

# Create blueprint
auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    form = RegistrationForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    new_user = User(
        email=form.email.data.strip().lower(),
        password=form.password.data,
        first_name=form.first_name.data.strip(),
        last_name=form.last_name.data.strip(),
        role=form.role.data,
    )
    # Academic profile only applies to students
    if new_user.role == "student":
        new_user.year = form.year.data
        new_user.major = form.major.data
    else:
        new_user.specializations = form.specializations.data or ["academic"]

    db.session.add(new_user)
    db.session.commit()

    login_user(new_user)
    logger.info(f"Registered {new_user.role} account {new_user.id}")

    return jsonify({
        "message": "User created successfully",
        "user": new_user.to_dict(),
    }), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    user = User.query.filter_by(email=form.email.data.strip().lower()).first()
    if not user or not user.is_active or not user.verify_password(form.password.data):
        return error_response("Invalid credentials", 401)

    user.last_login = datetime.utcnow()
    db.session.commit()

    login_user(user, remember=form.remember.data)
    return jsonify({
        "message": "Login successful",
        "user": user.to_dict(),
    })


@auth_bp.route("/logout", methods=["POST"])
@login_required_api
def logout():
    logout_user()
    return jsonify({"message": "Logged out"})


@auth_bp.route("/me", methods=["GET"])
@login_required_api
def me():
    return jsonify({"user": current_user.to_dict()})
