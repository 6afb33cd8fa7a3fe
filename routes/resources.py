from flask import Blueprint, request, jsonify
from flask_login import current_user
from sqlalchemy import or_
from extensions import db
from models.resource import Resource
from forms import ResourceForm, ResourceUpdateForm
from utils.errors import error_response, form_error_response
from utils.helpers import student_required, get_limit, submitted_fields, apply_changes

# Create blueprint
resources_bp = Blueprint('resources', __name__)

EDITABLE_FIELDS = ('title', 'type', 'content', 'subject', 'folder', 'tags',
                   'is_public', 'description')

@resources_bp.route('/', methods=['GET'])
@student_required
def index():
    query = Resource.query.filter_by(user_id=current_user.id)

    for field in ('subject', 'folder', 'type'):
        if request.args.get(field):
            query = query.filter(getattr(Resource, field) == request.args[field])

    search = (request.args.get('search') or '').strip()
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(Resource.title.ilike(pattern), Resource.description.ilike(pattern)))

    resources = query\
        .order_by(Resource.created_at.desc(), Resource.id.desc())\
        .limit(get_limit(request.args.get('limit')))\
        .all()

    return jsonify({'resources': [r.to_dict() for r in resources]})

@resources_bp.route('/', methods=['POST'])
@student_required
def create_resource():
    form = ResourceForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    resource = Resource(
        user_id=current_user.id,
        title=form.title.data.strip(),
        type=form.type.data,
        content=form.content.data,
        subject=form.subject.data.strip(),
        folder=(form.folder.data or '').strip() or 'General',
        tags=form.tags.data or [],
        is_public=form.is_public.data,
        description=form.description.data
    )

    db.session.add(resource)
    db.session.commit()

    return jsonify({'resource': resource.to_dict(), 'message': 'Resource created successfully'}), 201

@resources_bp.route('/<int:resource_id>', methods=['PUT'])
@student_required
def update_resource(resource_id):
    resource = Resource.query.filter_by(id=resource_id, user_id=current_user.id).first()
    if resource is None:
        return error_response('Resource not found', 404)

    payload = request.get_json(silent=True) or {}
    form = ResourceUpdateForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    apply_changes(resource, submitted_fields(form, payload), EDITABLE_FIELDS)

    db.session.commit()
    return jsonify({'resource': resource.to_dict(), 'message': 'Resource updated successfully'})

@resources_bp.route('/<int:resource_id>', methods=['DELETE'])
@student_required
def delete_resource(resource_id):
    resource = Resource.query.filter_by(id=resource_id, user_id=current_user.id).first()
    if resource is None:
        return error_response('Resource not found', 404)

    db.session.delete(resource)
    db.session.commit()
    return jsonify({'message': 'Resource deleted successfully'})

@resources_bp.route('/folders', methods=['GET'])
@student_required
def folders():
    rows = db.session.query(Resource.folder)\
        .filter_by(user_id=current_user.id)\
        .distinct()\
        .order_by(Resource.folder)\
        .all()
    return jsonify({'folders': [folder for folder, in rows]})

@resources_bp.route('/subjects', methods=['GET'])
@student_required
def subjects():
    rows = db.session.query(Resource.subject)\
        .filter_by(user_id=current_user.id)\
        .distinct()\
        .order_by(Resource.subject)\
        .all()
    return jsonify({'subjects': [subject for subject, in rows]})
