#!/usr/bin/env python3
"""
Rucheng dialect dictionary app
Main entry point for the deployed application
References: data/rucheng_data.json, static/audio/
"""

from rucheng_dialect.app.app import main


if __name__ == "__main__":
    main()
