"""Navigation target resolution and fix-target prediction."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass

from uiflowcheck.models.schemas import TargetKind, TargetResolution
from uiflowcheck.tools.file_tools import ProjectFiles

SCREEN_MODULE_RE = re.compile(r"SCR-([A-Z]+)-")
SLUG_STRIP_RE = re.compile(r"[^一-龥a-z0-9-]")
WHITESPACE_DASH_RE = re.compile(r"\s+")
DASH_RUN_RE = re.compile(r"-+")

# Row label keyword -> (screen slug, description); first match wins, so
# longer keywords are listed before their shorter prefixes.
SETTINGS_TARGETS: list[tuple[str, str, str]] = [
    ("個人資料", "profile", "Edit your personal information"),
    ("帳號安全", "security", "Manage password and security settings"),
    ("密碼", "password", "Change password"),
    ("通知設定", "notification", "Manage notification preferences"),
    ("通知", "notification", "Manage notification preferences"),
    ("偏好設定", "preferences", "Personalization settings"),
    ("語言", "language", "Change app language"),
    ("主題", "theme", "Change appearance theme"),
    ("外觀", "appearance", "Change appearance settings"),
    ("深色模式", "darkmode", "Toggle dark mode"),
    ("隱私", "privacy", "Privacy settings"),
    ("資料備份", "backup", "Back up and restore data"),
    ("備份", "backup", "Back up and restore data"),
    ("同步", "sync", "Sync settings"),
    ("幫助", "help", "Get help and support"),
    ("說明", "help", "Get help and support"),
    ("客服", "support", "Contact customer support"),
    ("支援", "support", "Contact customer support"),
    ("意見回饋", "feedback", "Send feedback"),
    ("回饋", "feedback", "Send feedback"),
    ("關於", "about", "View app information"),
    ("版本", "version", "View version information"),
    ("使用條款", "terms", "View terms of use"),
    ("服務條款", "terms", "View terms of service"),
    ("條款", "terms", "View terms of use"),
    ("學習設定", "learning", "Adjust learning preferences"),
    ("學習偏好", "learning", "Adjust learning preferences"),
    ("聲音", "sound", "Adjust sound settings"),
    ("音效", "sound", "Adjust sound effects"),
    ("訂閱", "subscription", "Manage subscription plan"),
    ("付款", "payment", "Manage payment methods"),
    ("登出", "logout", "Sign out"),
    ("刪除帳號", "delete-account", "Delete your account"),
    ("語音設定", "voice", "Adjust speech rate and volume"),
    ("語音", "voice", "Adjust voice settings"),
    ("資料管理", "data", "Manage your data"),
    ("清除快取", "cache", "Clear cached data"),
    ("快取", "cache", "Clear cache"),
    ("資料", "data", "Manage data settings"),
    ("分享", "share", "Share the app"),
    ("邀請", "invite", "Invite friends"),
    ("評分", "rate", "Rate the app on the App Store"),
    ("聯絡我們", "contact", "Contact support"),
    ("常見問題", "faq", "Frequently asked questions"),
    ("FAQ", "faq", "Frequently asked questions"),
    ("Profile", "profile", "Edit your personal information"),
    ("Security", "security", "Manage password and security settings"),
    ("Password", "password", "Change password"),
    ("Notification", "notification", "Manage notification preferences"),
    ("Language", "language", "Change app language"),
    ("Privacy", "privacy", "Privacy settings"),
    ("Help", "help", "Get help and support"),
    ("About", "about", "View app information"),
    ("Terms", "terms", "View terms of use"),
    ("Subscription", "subscription", "Manage subscription plan"),
    ("Log out", "logout", "Sign out"),
]


@dataclass
class TargetPrediction:
    """A suggested target screen for an unwired element."""

    screen_id: str
    description: str
    matched: str | None = None


def _strip_query(target: str) -> str:
    for separator in ("?", "#"):
        target = target.split(separator, 1)[0]
    return target


def resolve_target(
    target: str,
    screen: str,
    files: ProjectFiles,
    known_screens: list[str],
    external_prefixes: list[str],
) -> TargetResolution:
    """Resolve a navigation target found in ``screen`` (project-relative)."""
    if any(target.startswith(prefix) for prefix in external_prefixes):
        return TargetResolution(valid=True, kind=TargetKind.EXTERNAL)

    if "alert(" in target:
        return TargetResolution(valid=True, kind=TargetKind.ALERT)

    clean = _strip_query(target)
    if not clean:
        return TargetResolution(valid=False, kind=TargetKind.MISSING, path=target)

    relative = posixpath.normpath(posixpath.join(posixpath.dirname(screen), clean))

    if not relative.startswith("..") and files.exists(relative):
        return TargetResolution(valid=True, kind=TargetKind.FILE, path=relative)

    for known in known_screens:
        if known == relative or known.endswith(clean) or clean.endswith(posixpath.basename(known)):
            return TargetResolution(valid=True, kind=TargetKind.MATCHED, path=known)

    return TargetResolution(valid=False, kind=TargetKind.MISSING, path=relative)


def predict_target_screen(text: str, screen: str) -> TargetPrediction:
    """Suggest a target screen file name for an unwired row or button."""
    module_match = SCREEN_MODULE_RE.search(screen)
    module = module_match.group(1) if module_match else "SETTING"

    for keyword, slug, description in SETTINGS_TARGETS:
        if keyword in text:
            return TargetPrediction(
                screen_id=f"SCR-{module}-002-{slug}.html",
                description=description,
                matched=keyword,
            )

    slug = WHITESPACE_DASH_RE.sub("-", text)[:15].lower()
    slug = SLUG_STRIP_RE.sub("", slug)
    slug = DASH_RUN_RE.sub("-", slug).strip("-")

    return TargetPrediction(
        screen_id=f"SCR-{module}-002-{slug or 'detail'}.html",
        description=f"{text[:20]} settings" if text else "Detail settings",
    )
