"""Example usage of the structextract library."""

from dataclasses import dataclass
from typing import Optional

from structextract import Extractor, embedded, tagged


@dataclass
class Audit:
    CreatedBy: str = tagged('json:"created_by" db:"created_by"', default="")
    Revision: int = tagged('json:"revision" db:"revision"', default=0)


@dataclass
class Business:
    ID: int = tagged('json:"id" db:"id"', default=0)
    Name: str = tagged('json:"name" db:"business_name"', default="")
    Email: str = tagged('json:"email,omitempty" db:"email_address"', default="")
    Notes: Optional[str] = tagged('json:"notes"', default=None)
    Audit: Audit = embedded(Audit)


acme = Business(ID=1, Name="Acme", Audit=Audit(CreatedBy="alice", Revision=3))

# Field names and values in declaration order
ext = Extractor(acme)
print("Names:          ", ext.names())
print("Values:         ", ext.values())

# Names under a tag; omitempty hides the empty Email
print("json names:     ", ext.names_from_tag("json"))
print("db columns:     ", ext.names_from_tag_with_prefix("db", "b."))
print("json -> db:     ", ext.tag_mapping("json", "db"))

# Include the fields of the embedded Audit record, skip the ID
ext = Extractor(acme).use_embedded_structs().ignore_field("ID")
print("\nWith embedded:  ", ext.field_value_from_tag_map("db"))

# Turn an API payload into a database changeset
payload = {"name": "Acme Corp", "revision": 4}
print("Changeset:      ", ext.get_changeset_for_tag(payload, "json", "db"))

# Apply the payload to a copy of the record
updated = ext.apply_map(payload, "json")
print("\nOriginal:       ", acme)
print("Updated:        ", updated)
