#!/usr/bin/env python3
"""
Generate a secret key for signing session tokens.
Run this and copy the output to your .env file.
"""

import secrets

if __name__ == "__main__":
    print("=" * 60)
    print("Relief API: JWT Secret Key Generator")
    print("=" * 60)
    print("\nGenerating a secure random key...\n")

    print(f"JWT_SECRET_KEY={secrets.token_hex(32)}")
    print("\n" + "=" * 60)
    print("Copy the line above to your .env file, next to DB_URI")
    print("=" * 60)
