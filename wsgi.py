from filestore import create_app

app = create_app()
