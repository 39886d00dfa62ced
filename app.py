from src.construction_hr.construction_hr.main import create_app, socketio_run_options

app = create_app()
socketio = app.extensions["socketio"]

if __name__ == "__main__":
    socketio.run(app, **socketio_run_options(app))
