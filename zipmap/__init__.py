"""ZipMap: user records geocoded from ZIP codes, with weather and nearby places.

The ASGI application lives in ``zipmap.main``; the Lambda entrypoint in
``zipmap.lambda_handler``.
"""
