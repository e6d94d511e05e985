class NoStoreMiddleware:
    """Mark API responses ``Cache-Control: no-store`` so polls always reach the server."""
    PREFIXES = ('/api/',)

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        path = request.path or ''
        if any(path.startswith(p) for p in self.PREFIXES):
            response['Cache-Control'] = 'no-store'
        return response
