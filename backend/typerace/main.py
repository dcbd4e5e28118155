from flask import Blueprint, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Typing race relay is running'})


@main.route('/api/health')
def health():
    return jsonify({'status': 'ok'})
