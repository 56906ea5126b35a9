# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
DiscordController — drives the Discord web client via Selenium + Firefox.

Handles: open the server/channel, join the voice channel, start/stop screen
share, leave, and the interactive login page (QR code or credentials).

All methods block; the backend runs them in the default executor under a
timeout.  Bounded waits that expire raise SessionTimeout, WebDriver
failures raise SessionError.

Note: Discord's DOM changes with client updates.  If automation breaks,
inspect the web client and update the selectors below (data-list-item-id,
aria-label, class names).  A persistent Firefox profile keeps the login
across restarts.
"""

import logging
import os
import time

from selenium import webdriver
from selenium.common.exceptions import (
    NoSuchElementException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.firefox.options import Options
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from ..errors import SessionError, SessionTimeout, SessionUnavailable

log = logging.getLogger(__name__)

DISCORD_URL = "https://discord.com"
LOGIN_URL = f"{DISCORD_URL}/login"

# Selectors
APP_LOADED = "[data-list-item-id]"
SHARE_SCREEN = ('button[aria-label="Share Your Screen"], button[aria-label="Screen Share"], '
                '[class*="shareScreen"]')
SHARE_SOURCE = '[class*="sourceRow"], button[class*="source"]'
STOP_SHARING = ('button[aria-label="Stop Sharing"], button[aria-label="Stop Screen Share"], '
                '[class*="stopShare"]')
DISCONNECT = 'button[aria-label="Disconnect"], [class*="disconnect"]'
LOGIN_EMAIL = 'input[name="email"]'
LOGIN_PASSWORD = 'input[name="password"]'
LOGIN_QR = '[class*="qrCode"]'


class DiscordController:
    """One Firefox instance logged into Discord."""

    def __init__(self, server_id: str, voice_channel_id: str, profile_path: str,
                 wait_timeout: float = 30):
        self.server_id = server_id
        self.voice_channel_id = voice_channel_id
        self.profile_path = os.path.abspath(profile_path)
        self.wait_timeout = wait_timeout
        self._driver: webdriver.Firefox | None = None
        self._headless = False

    @property
    def channel_url(self) -> str:
        return f"{DISCORD_URL}/channels/{self.server_id}/{self.voice_channel_id}"

    def is_headless_only(self) -> bool:
        """True if the browser was started for login only (cannot share a display)."""
        return self._driver is not None and self._headless

    # ── Browser lifecycle ──

    def _start_driver(self, headless: bool):
        options = Options()
        # Persistent profile so the login survives restarts
        os.makedirs(self.profile_path, exist_ok=True)
        options.add_argument("-profile")
        options.add_argument(self.profile_path)
        if headless:
            options.add_argument("-headless")
        # WebRTC / screen share without permission prompts
        options.set_preference("media.navigator.permission.disabled", True)
        options.set_preference("media.navigator.streams.fake", False)
        options.set_preference("dom.webdriver.enabled", False)
        try:
            self._driver = webdriver.Firefox(options=options)
        except WebDriverException as e:
            raise SessionError(f"Could not start Firefox: {e.msg or e}") from e
        self._headless = headless
        log.info("Firefox started (%s, profile %s)",
                 "headless" if headless else "display", self.profile_path)

    def _require_driver(self) -> webdriver.Firefox:
        if self._driver is None:
            raise SessionError("Discord controller not initialized")
        return self._driver

    def _wait_for(self, selector: str, timeout: float | None = None, clickable=False):
        driver = self._require_driver()
        condition = EC.element_to_be_clickable if clickable else EC.presence_of_element_located
        try:
            return WebDriverWait(driver, timeout or self.wait_timeout).until(
                condition((By.CSS_SELECTOR, selector)))
        except TimeoutException as e:
            raise SessionTimeout(f"Timed out waiting for Discord element {selector!r}") from e

    # ── Session ──

    def init(self):
        """Start the browser and open the configured voice channel."""
        if not self.server_id or not self.voice_channel_id:
            raise SessionUnavailable(
                "discord.server_id and discord.voice_channel_id must be set for screen share")
        self._start_driver(headless=False)
        self.navigate_to_channel()

    def navigate_to_channel(self):
        driver = self._require_driver()
        try:
            driver.get(self.channel_url)
        except WebDriverException as e:
            raise SessionError(f"Could not open {self.channel_url}: {e.msg or e}") from e
        self._wait_for(APP_LOADED)
        log.info("Discord loaded: server %s", self.server_id)

    def join_voice_channel(self):
        # Channel list items use data-list-item-id="channels___<channelId>"
        selector = f'a[data-list-item-id="channels___{self.voice_channel_id}"]'
        channel = self._wait_for(selector, timeout=10, clickable=True)
        try:
            channel.click()
        except WebDriverException as e:
            raise SessionError(f"Could not join voice channel: {e.msg or e}") from e
        time.sleep(2)  # voice connection
        log.info("Joined voice channel %s", self.voice_channel_id)

    def start_screen_share(self):
        button = self._wait_for(SHARE_SCREEN, timeout=10, clickable=True)
        try:
            button.click()
        except WebDriverException as e:
            raise SessionError(f"Could not start screen share: {e.msg or e}") from e

        # Source picker may appear; some setups auto-select
        time.sleep(1.5)
        sources = self._require_driver().find_elements(By.CSS_SELECTOR, SHARE_SOURCE)
        if sources:
            try:
                sources[0].click()
            except WebDriverException as e:
                log.debug("Source picker click failed (auto-selected?): %s", e.msg)
        time.sleep(1)
        log.info("Screen share started")

    def stop_screen_share(self):
        driver = self._require_driver()
        try:
            driver.find_element(By.CSS_SELECTOR, STOP_SHARING).click()
            log.info("Screen share stopped")
        except NoSuchElementException:
            log.debug("No stop-sharing button — share already ended")

    def leave_voice_channel(self):
        if self._driver is None:
            return
        self.stop_screen_share()
        try:
            self._driver.find_element(By.CSS_SELECTOR, DISCONNECT).click()
            log.info("Left voice channel")
        except NoSuchElementException:
            log.debug("No disconnect button — not in a voice channel")

    def shutdown(self):
        if self._driver is None:
            return
        try:
            self.leave_voice_channel()
        finally:
            self._driver.quit()
            self._driver = None
            log.info("Firefox closed")

    # ── Login ──

    def init_for_login(self, email: str | None = None, password: str | None = None):
        """Open the login page in a headless browser.

        With credentials the form is submitted and ``("json", {...})`` is
        returned; otherwise ``("png", bytes)`` — a screenshot of the QR code
        to scan with the Discord mobile app.  The session lands in the
        persistent profile either way.
        """
        if self._driver is None:
            self._start_driver(headless=True)
        driver = self._require_driver()
        try:
            driver.get(LOGIN_URL)
        except WebDriverException as e:
            raise SessionError(f"Could not open Discord login: {e.msg or e}") from e

        if email and password:
            self._wait_for(LOGIN_EMAIL).send_keys(email)
            password_input = driver.find_element(By.CSS_SELECTOR, LOGIN_PASSWORD)
            password_input.send_keys(password)
            password_input.send_keys(Keys.RETURN)
            log.info("Discord credentials submitted for %s", email)
            return "json", {
                "status": "submitted",
                "message": "Credentials submitted. Session is saved to the profile once Discord accepts them.",
            }

        qr = self._wait_for(LOGIN_QR)
        time.sleep(1)  # QR canvas renders after its container
        log.info("Discord login QR captured")
        return "png", qr.screenshot_as_png
