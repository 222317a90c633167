from src.dayflow.dayflow.main import create_app

app = create_app()


if __name__ == "__main__":
    # threaded: one request per thread; collections are locked per write
    app.run(port=3000, threaded=True)
