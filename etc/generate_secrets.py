import secrets


if __name__ == "__main__":
    secret_key = secrets.token_hex()

    print(f'FLASK_SECRET_KEY="{secret_key}"')
    # issued by the authorization server when registering the client
    print('FLASK_OAUTH_CLIENT_ID=""')
    print('FLASK_OAUTH_CLIENT_SECRET=""')
