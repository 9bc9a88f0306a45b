from hiregate import create_app

app = create_app()
