"""clipstash: bounded, persistent clipboard history with a rofi picker."""

__version__ = "0.1.0"
