import click

from turnchat import create_app, socketio

app = create_app()


@click.command()
@click.option('--host', default=lambda: app.config['HOST'], show_default='HOST or 127.0.0.1')
@click.option('--port', type=int, default=lambda: app.config['PORT'], show_default='PORT or 3000')
@click.option('--debug/--no-debug', default=False)
def serve(host, port, debug):
    """Run the session server with websocket support."""
    socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    serve()
