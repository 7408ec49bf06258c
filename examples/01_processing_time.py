"""
Processing-time pipeline example.

Demonstrates:
- Wrapping a FastAPI app with an explicit, ordered Pipeline
- Timing the downstream chain with ProcessingTime (X-ElapsedTime header)
- Writing a custom stage with FunctionStage
"""

import asyncio

from fastapi import FastAPI

from fastapi_middleware_pipeline import (
    FunctionStage,
    Pipeline,
    PipelineMiddleware,
    ProcessingTime,
    RequestContext,
    SecurityHeaders,
    configure_logging,
)

configure_logging("INFO")

app = FastAPI(title="Processing Time Example")


async def served_by(ctx: RequestContext, call_next) -> None:
    """Tag every response with the serving node."""
    ctx.add_header("X-Served-By", "node-1")
    await call_next(ctx)


pipeline = Pipeline(
    SecurityHeaders(),
    ProcessingTime(),
    FunctionStage(served_by),
)


@app.get("/")
async def index():
    await asyncio.sleep(0.05)
    return {"message": "Hello, World!"}


app.add_middleware(PipelineMiddleware, pipeline=pipeline)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -i http://localhost:8000/
