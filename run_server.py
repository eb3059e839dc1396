import os

import uvicorn

from chainview.observability import configure_logging

if __name__ == "__main__":
    configure_logging(os.environ.get("CHAINVIEW_LOG_LEVEL", "INFO"))

    print("Starting Chain Visualizer API Server...")
    print("Docs available at: http://localhost:8001/docs")

    uvicorn.run(
        "chainview_service.server:app",
        host="0.0.0.0",
        port=int(os.environ.get("CHAINVIEW_PORT", "8001")),
        reload=True
    )
