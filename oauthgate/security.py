import aiohttp

DEFAULT_TIMEOUT = 20


class HardenedHttp:
    timeout: aiohttp.ClientTimeout
    user_agent: str

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, user_agent: str = "oauthgate/0"):
        self.timeout = aiohttp.ClientTimeout(timeout, connect=min(timeout, 5))
        self.user_agent = user_agent

    def get_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=self.timeout,
            headers={
                "User-Agent": self.user_agent,
            },
        )


hardened_http = HardenedHttp()
