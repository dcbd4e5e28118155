import logging

from typerace import create_app, log_level, socketio

app = create_app()
logging.basicConfig(level=log_level(app.config.get('LOG_LEVEL')), format='%(asctime)s %(levelname)s %(name)s: %(message)s')

if __name__ == '__main__':
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], allow_unsafe_werkzeug=True)
