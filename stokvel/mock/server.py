"""Mock stokvel backend for local development and integration tests

Serves the REST surface the dashboard consumes from memory:

    POST   /api/auth/login
    GET    /api/members              POST /api/members
    GET    /api/members/<id>         PUT  /api/members/<id>   DELETE /api/members/<id>
    GET    /api/contributions        POST /api/contributions  PUT /api/contributions/<id>
    GET    /api/announcements        POST /api/announcements  DELETE /api/announcements/<id>
    GET    /api/stats/<member_id>

Deleting a member never removes their contributions.
"""
import argparse
import json
import logging
import secrets
import socketserver
import threading
from datetime import date
from http.server import BaseHTTPRequestHandler
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

SEED_MEMBERS = [
    {
        "id": "PH001",
        "name": "Thandi Mokoena",
        "id_number": "8001015009087",
        "phone": "0821234567",
        "email": "admin@powerhouse.co.za",
        "password": "admin123",
        "status": "Active",
        "role": "admin",
        "bank_name": "FNB",
        "account_holder": "T Mokoena",
        "account_number": "62000000001",
        "branch_code": "250655",
    },
    {
        "id": "PH002",
        "name": "Sipho Dlamini",
        "id_number": "9002026009081",
        "phone": "0837654321",
        "email": "sipho@powerhouse.co.za",
        "password": "member123",
        "status": "Active",
        "role": "member",
        "bank_name": "Capitec",
        "account_holder": "S Dlamini",
        "account_number": "1400000002",
        "branch_code": "470010",
    },
]

# Request field -> stored field
MEMBER_FIELDS = {
    "name": "name",
    "idNumber": "id_number",
    "phone": "phone",
    "email": "email",
    "password": "password",
    "status": "status",
    "role": "role",
    "bankName": "bank_name",
    "accountHolder": "account_holder",
    "accountNumber": "account_number",
    "branchCode": "branch_code",
}


class HTTPError(Exception):
    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(message)


class MockStore:
    """In-memory club data"""

    def __init__(self, seed: bool = True):
        self.lock = threading.Lock()
        self.members: Dict[str, Dict[str, Any]] = {}
        self.contributions: List[Dict[str, Any]] = []
        self.announcements: List[Dict[str, Any]] = []
        self.tokens: Dict[str, str] = {}
        self._member_seq = 0
        self._contribution_seq = 0
        self._announcement_seq = 0
        if seed:
            for member in SEED_MEMBERS:
                self.members[member["id"]] = dict(member)
            self._member_seq = len(SEED_MEMBERS)

    def revoke_tokens(self) -> None:
        """Invalidate every issued token"""
        with self.lock:
            self.tokens.clear()

    # Auth

    def login(self, email: str, password: str) -> Dict[str, Any]:
        for member in self.members.values():
            if member["email"] == email and member["password"] == password:
                token = secrets.token_hex(16)
                self.tokens[token] = member["id"]
                return {"token": token, "user": self._public_user(member)}
        raise HTTPError(401, "Invalid email or password")

    def user_for_token(self, token: Optional[str]) -> Dict[str, Any]:
        member_id = self.tokens.get(token or "")
        if not member_id or member_id not in self.members:
            raise HTTPError(401, "Invalid or expired token")
        return self.members[member_id]

    @staticmethod
    def _public_user(member: Dict[str, Any]) -> Dict[str, Any]:
        return {key: member.get(key) for key in ("id", "name", "email", "role", "status")}

    @staticmethod
    def _public_member(member: Dict[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in member.items() if key != "password"}

    # Members

    def list_members(self) -> List[Dict[str, Any]]:
        return [self._public_member(m) for m in self.members.values()]

    def get_member(self, member_id: str) -> Dict[str, Any]:
        if member_id not in self.members:
            raise HTTPError(404, "Member not found")
        return self._public_member(self.members[member_id])

    def create_member(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if not data.get("name") or not data.get("email") or not data.get("idNumber"):
            raise HTTPError(400, "Name, email and ID number are required")
        if any(m["email"] == data["email"] for m in self.members.values()):
            raise HTTPError(400, "Email already exists")

        self._member_seq += 1
        member = {"id": f"PH{self._member_seq:03d}", "status": "Active", "role": "member", "password": "member123"}
        for request_field, stored_field in MEMBER_FIELDS.items():
            if data.get(request_field) not in (None, ""):
                member[stored_field] = data[request_field]
        self.members[member["id"]] = member
        return self._public_member(member)

    def update_member(self, member_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        if member_id not in self.members:
            raise HTTPError(404, "Member not found")
        member = self.members[member_id]
        for request_field, stored_field in MEMBER_FIELDS.items():
            if request_field in data:
                member[stored_field] = data[request_field]
        return self._public_member(member)

    def delete_member(self, member_id: str) -> Dict[str, Any]:
        if member_id not in self.members:
            raise HTTPError(404, "Member not found")
        del self.members[member_id]
        self.tokens = {t: m for t, m in self.tokens.items() if m != member_id}
        return {"message": "Member deleted"}

    # Contributions

    def list_contributions(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        if user["role"] == "admin":
            return list(self.contributions)
        return [c for c in self.contributions if c["member_id"] == user["id"]]

    def create_contribution(self, data: Dict[str, Any]) -> Dict[str, Any]:
        member_id = data.get("memberId")
        if not member_id or not data.get("month"):
            raise HTTPError(400, "Member and month are required")
        if member_id not in self.members:
            raise HTTPError(400, "Member not found")

        status = data.get("status") or "Pending"
        self._contribution_seq += 1
        contribution = {
            "id": self._contribution_seq,
            "member_id": member_id,
            "month": data["month"],
            "amount": data.get("amount") if data.get("amount") is not None else 300,
            "status": status,
            "date_paid": data.get("date") or (date.today().isoformat() if status == "Paid" else None),
        }
        self.contributions.append(contribution)
        return contribution

    def update_contribution(self, contribution_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        status = data.get("status")
        if status not in ("Paid", "Pending", "Overdue"):
            raise HTTPError(400, "Invalid status")
        for contribution in self.contributions:
            if str(contribution["id"]) == contribution_id:
                contribution["status"] = status
                contribution["date_paid"] = date.today().isoformat() if status == "Paid" else None
                return contribution
        raise HTTPError(404, "Contribution not found")

    # Announcements

    def create_announcement(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if not data.get("title") or not data.get("message"):
            raise HTTPError(400, "Title and message are required")
        self._announcement_seq += 1
        announcement = {
            "id": self._announcement_seq,
            "title": data["title"],
            "message": data["message"],
            "priority": data.get("priority") or "normal",
            "announcement_date": date.today().isoformat(),
        }
        # Newest first
        self.announcements.insert(0, announcement)
        return announcement

    def delete_announcement(self, announcement_id: str) -> Dict[str, Any]:
        for index, announcement in enumerate(self.announcements):
            if str(announcement["id"]) == announcement_id:
                del self.announcements[index]
                return {"message": "Announcement deleted"}
        raise HTTPError(404, "Announcement not found")

    # Stats

    def stats(self, member_id: str) -> Dict[str, Any]:
        paid = [c for c in self.contributions if c["member_id"] == member_id and c["status"] == "Paid"]
        total = sum(float(c["amount"]) for c in paid)
        return {
            "totalSaved": total,
            "monthsContributed": len(paid),
            "estimatedPayout": total,
        }


class MockStokvelHandler(BaseHTTPRequestHandler):
    """Routes REST requests to the server's MockStore"""

    @property
    def store(self) -> MockStore:
        return self.server.store

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)

    def _send_json(self, status: int, content: Any = None) -> None:
        body = json.dumps(content).encode("utf-8") if content is not None else b""
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self._send_cors_headers()
        self.end_headers()
        if body:
            self.wfile.write(body)

    def _send_cors_headers(self) -> None:
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", "GET, POST, PUT, DELETE, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type, Authorization")

    def _read_body(self) -> Dict[str, Any]:
        length = int(self.headers.get("Content-Length", 0))
        if length <= 0:
            return {}
        try:
            data = json.loads(self.rfile.read(length).decode("utf-8"))
        except (ValueError, UnicodeDecodeError):
            raise HTTPError(400, "Invalid JSON body")
        return data if isinstance(data, dict) else {}

    def _token(self) -> Optional[str]:
        header = self.headers.get("Authorization", "")
        if header.startswith("Bearer "):
            return header[len("Bearer "):]
        return None

    def _route(self) -> Tuple[str, List[str]]:
        path = self.path.split("?", 1)[0]
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        parts = [p for p in path.split("/") if p]
        if not parts:
            raise HTTPError(404, "Not found")
        return parts[0], parts[1:]

    def _require_admin(self, user: Dict[str, Any]) -> None:
        if user["role"] != "admin":
            raise HTTPError(403, "Admin access required")

    def _dispatch(self, method: str) -> None:
        try:
            with self.store.lock:
                status, content = self._handle(method)
            self._send_json(status, content)
        except HTTPError as e:
            self._send_json(e.status, {"error": e.message})
        except Exception:
            logger.exception("Mock backend failed handling %s %s", method, self.path)
            self._send_json(500, {"error": "Internal server error"})

    def _handle(self, method: str) -> Tuple[int, Any]:
        resource, rest = self._route()
        store = self.store

        if resource == "auth" and rest == ["login"] and method == "POST":
            body = self._read_body()
            return 200, store.login(body.get("email", ""), body.get("password", ""))

        user = store.user_for_token(self._token())
        item_id = rest[0] if rest else None

        if resource == "members":
            self._require_admin(user)
            if method == "GET":
                return 200, store.get_member(item_id) if item_id else store.list_members()
            if method == "POST" and not item_id:
                return 201, store.create_member(self._read_body())
            if method == "PUT" and item_id:
                return 200, store.update_member(item_id, self._read_body())
            if method == "DELETE" and item_id:
                return 200, store.delete_member(item_id)

        if resource == "contributions":
            if method == "GET" and not item_id:
                return 200, store.list_contributions(user)
            self._require_admin(user)
            if method == "POST" and not item_id:
                return 201, store.create_contribution(self._read_body())
            if method == "PUT" and item_id:
                return 200, store.update_contribution(item_id, self._read_body())

        if resource == "announcements":
            if method == "GET" and not item_id:
                return 200, list(store.announcements)
            self._require_admin(user)
            if method == "POST" and not item_id:
                return 201, store.create_announcement(self._read_body())
            if method == "DELETE" and item_id:
                return 200, store.delete_announcement(item_id)

        if resource == "stats" and method == "GET" and item_id:
            if user["role"] != "admin" and user["id"] != item_id:
                raise HTTPError(403, "Cannot view another member's stats")
            return 200, store.stats(item_id)

        raise HTTPError(404, "Not found")

    def do_GET(self):
        self._dispatch("GET")

    def do_POST(self):
        self._dispatch("POST")

    def do_PUT(self):
        self._dispatch("PUT")

    def do_DELETE(self):
        self._dispatch("DELETE")

    def do_OPTIONS(self):
        self.send_response(200)
        self._send_cors_headers()
        self.end_headers()


class MockStokvelServer(socketserver.ThreadingMixIn, socketserver.TCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, address, store: Optional[MockStore] = None):
        self.store = store or MockStore()
        super().__init__(address, MockStokvelHandler)

    @property
    def base_url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}{API_PREFIX}"


def run_server(port: int = 5000, host: str = "localhost") -> None:
    """Run the mock backend until interrupted"""
    server = MockStokvelServer((host, port))
    logger.info("Stokvel mock backend up at: %s", server.base_url)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        server.server_close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Mock stokvel backend")
    parser.add_argument("--host", default="localhost", help="Bind address (default: localhost)")
    parser.add_argument("--port", type=int, default=5000, help="Server port (default: 5000)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    run_server(args.port, args.host)


if __name__ == "__main__":
    main()
