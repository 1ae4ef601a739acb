class VidRelayError(Exception):
    """Base error; carries the HTTP status the API answers with."""
    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

class MissingParameter(VidRelayError):
    status_code = 400
    default_message = "URL is required"

class ExtractorTimeout(VidRelayError):
    default_message = "Analysis timed out"

class ExtractorFailure(VidRelayError):
    default_message = "yt-dlp process failed or timed out"

class OutputParseFailure(VidRelayError):
    default_message = "Failed to parse JSON output"

class DownloadFailure(VidRelayError):
    default_message = "Download failed"

class ClientDisconnected(VidRelayError):
    # nginx's "client closed request"; never actually reaches the client
    status_code = 499
    default_message = "Client disconnected"
