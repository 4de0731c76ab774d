# example.py
import logging
import sys

from sshsession import AuthConfig, SSHClient, SSHSessionError

logging.basicConfig(level=logging.INFO)

auth = AuthConfig.key_file_auth("deploy", "~/.ssh/id_ed25519")

try:
    with SSHClient("web01.example.com", auth=auth) as client:
        client.authenticate()

        client.send_file("build/app.tar.gz", "/tmp/app.tar.gz", 0o600) \
              .run_command("tar -xzf /tmp/app.tar.gz -C /srv/app") \
              .run_command("systemctl restart app") \
              .run_command("systemctl is-active app")

        print(client.last_output.strip())
        client.receive_file("/var/log/app/deploy.log", "deploy.log")

    print(client.session_transcript)

except SSHSessionError as e:
    print(f"Deploy failed ({e.kind.name.lower()}): {e.message}", file=sys.stderr)
    sys.exit(1)
