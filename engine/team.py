# ── engine/team.py ──

class Team:
    def __init__(self, id, name, short_name, players=None):
        self.id = id
        self.name = name
        self.short_name = short_name
        self.players = list(players or [])   # player ids, squad order

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "short_name": self.short_name,
            "players": list(self.players),
        }

    @staticmethod
    def from_dict(data):
        return Team(
            id=data["id"],
            name=data["name"],
            short_name=data.get("short_name", data["name"][:3].upper()),
            players=data.get("players", []),
        )

    def __repr__(self):
        return f"Team(id={self.id!r}, name={self.name!r}, players={len(self.players)})"
