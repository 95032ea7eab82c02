import uvicorn

from llm_mock_server.app.core import config

if __name__ == "__main__":
    app_location = "llm_mock_server.app.main:app"
    print(f"Starting LLM Mock Server. App location: {app_location}")
    print(f"Listening on http://{config.HOST}:{config.PORT}")
    print(f"POST http://{config.HOST}:{config.PORT}/generate-token to get a test JWT.")
    uvicorn.run(app_location, host=config.HOST, port=config.PORT, reload=config.RELOAD)
