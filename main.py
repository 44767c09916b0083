"""Launch the road-data lookup FastAPI server."""

import uvicorn


def main():
    # logging is configured by the app lifespan
    uvicorn.run("road_data_lookup.server:app", host="0.0.0.0", port=8000, reload=True, log_config=None)


if __name__ == "__main__":
    main()
