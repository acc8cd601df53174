"""Constants used throughout the bot"""

SUPPORT_URL = "https://discord.gg/mFEehCPKEW"

STARTUP_BANNER = r"""
 _   _                      ____        _
| \ | | _____  ___   _ ___ | __ )  ___ | |_
|  \| |/ _ \ \/ / | | / __||  _ \ / _ \| __|
| |\  |  __/>  <| |_| \__ \| |_) | (_) | |_
|_| \_|\___/_/\_\\__,_|___/|____/ \___/ \__|

╔════════════════════════════════════════════════════════════╗
║                                                            ║
║   Version:   {version:<46}║
║   Support:   {support:<46}║
║                                                            ║
╚════════════════════════════════════════════════════════════╝
"""

EMOJIS = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "clock": "⏰",
    "ping": "🏓",
    "loading": "⏳",
    "settings": "⚙️",
}

COLORS = {
    "primary": 0x5865F2,
    "success": 0x57F287,
    "error": 0xED4245,
    "warning": 0xFEE75C,
    "info": 0x5865F2,
    "secondary": 0x99AAB5,
}
