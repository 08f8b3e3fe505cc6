"""
Tests for student queries, mutations and field resolvers
"""

import uuid
from datetime import UTC, datetime

import pytest
import pytest_asyncio
import strawberry

from registrar.graphql.resolvers.student import resolve_student_department
from registrar.graphql.types.student import Student

ADD_STUDENT = """
mutation AddStudent($input: AddStudentInput!) {
  addStudent(input: $input) {
    id name email rollNumber age phone
    department { id code }
  }
}
"""

UPDATE_STUDENT = """
mutation UpdateStudent($input: UpdateStudentInput!) {
  updateStudent(input: $input) { id name email rollNumber age phone department { code } }
}
"""

GET_STUDENT = """
query GetStudent($id: ID!) {
  student(id: $id) { id name email rollNumber age phone department { code } }
}
"""


@pytest_asyncio.fixture
async def department_id(execute):
    result = await execute(
        'mutation { addDepartment(input: {name: "CS", code: "CS01", hod: "A"}) { id } }'
    )
    assert result.errors is None
    return result.data["addDepartment"]["id"]


async def add_student(execute, department_id, **overrides):
    fields = {
        "name": "Anna",
        "email": "anna@x.edu",
        "rollNumber": "CS001",
        "age": 19,
        "phone": "555-0101",
        "departmentId": department_id,
    }
    fields.update(overrides)
    result = await execute(ADD_STUDENT, {"input": fields})
    assert result.errors is None, result.errors
    return result.data["addStudent"]


class TestAddStudent:
    @pytest.mark.asyncio
    async def test_add_student_resolves_department(self, execute, department_id):
        student = await add_student(execute, department_id)

        assert student["name"] == "Anna"
        assert student["rollNumber"] == "CS001"
        assert student["age"] == 19
        assert student["department"] == {"id": department_id, "code": "CS01"}

    @pytest.mark.asyncio
    async def test_optional_fields_default_to_null(self, execute, department_id):
        result = await execute(
            ADD_STUDENT,
            {
                "input": {
                    "name": "Bob",
                    "email": "bob@x.edu",
                    "rollNumber": "CS002",
                    "departmentId": department_id,
                }
            },
        )

        assert result.errors is None
        assert result.data["addStudent"]["age"] is None
        assert result.data["addStudent"]["phone"] is None

    @pytest.mark.asyncio
    async def test_duplicate_email_creates_nothing(self, execute, department_id):
        await add_student(execute, department_id)

        result = await execute(
            ADD_STUDENT,
            {
                "input": {
                    "name": "Other",
                    "email": "anna@x.edu",
                    "rollNumber": "CS009",
                    "departmentId": department_id,
                }
            },
        )

        assert result.data is None
        assert "email" in result.errors[0].message

        listing = await execute("{ students { id } }")
        assert len(listing.data["students"]) == 1

    @pytest.mark.asyncio
    async def test_unknown_department_rejected(self, execute):
        missing = str(uuid.uuid4())

        result = await execute(
            ADD_STUDENT,
            {
                "input": {
                    "name": "Anna",
                    "email": "anna@x.edu",
                    "rollNumber": "CS001",
                    "departmentId": missing,
                }
            },
        )

        assert result.errors[0].message == f"Department does not exist: {missing}"

    @pytest.mark.asyncio
    async def test_age_out_of_range_rejected(self, execute, department_id):
        result = await execute(
            ADD_STUDENT,
            {
                "input": {
                    "name": "Anna",
                    "email": "anna@x.edu",
                    "rollNumber": "CS001",
                    "age": 45,
                    "departmentId": department_id,
                }
            },
        )

        assert "age" in result.errors[0].message


class TestUpdateAndDeleteStudent:
    @pytest.mark.asyncio
    async def test_update_changes_only_given_field(self, execute, department_id):
        student = await add_student(execute, department_id)

        result = await execute(UPDATE_STUDENT, {"input": {"id": student["id"], "name": "X"}})

        assert result.errors is None
        assert result.data["updateStudent"] == {
            "id": student["id"],
            "name": "X",
            "email": "anna@x.edu",
            "rollNumber": "CS001",
            "age": 19,
            "phone": "555-0101",
            "department": {"code": "CS01"},
        }

    @pytest.mark.asyncio
    async def test_explicit_null_clears_optional_field(self, execute, department_id):
        student = await add_student(execute, department_id)

        result = await execute(UPDATE_STUDENT, {"input": {"id": student["id"], "phone": None}})

        assert result.errors is None
        assert result.data["updateStudent"]["phone"] is None
        assert result.data["updateStudent"]["age"] == 19

    @pytest.mark.asyncio
    async def test_move_student_to_other_department(self, execute, department_id):
        student = await add_student(execute, department_id)
        other = await execute(
            'mutation { addDepartment(input: {name: "Maths", code: "MA01", hod: "B"}) { id } }'
        )
        other_id = other.data["addDepartment"]["id"]

        result = await execute(
            UPDATE_STUDENT, {"input": {"id": student["id"], "departmentId": other_id}}
        )

        assert result.errors is None
        assert result.data["updateStudent"]["department"] == {"code": "MA01"}

    @pytest.mark.asyncio
    async def test_update_email_to_existing_leaves_record_unchanged(self, execute, department_id):
        await add_student(execute, department_id)
        other = await add_student(execute, department_id, email="bob@x.edu", rollNumber="CS002")

        result = await execute(
            UPDATE_STUDENT, {"input": {"id": other["id"], "email": "anna@x.edu"}}
        )

        assert result.data is None
        assert "email" in result.errors[0].message

        lookup = await execute(GET_STUDENT, {"id": other["id"]})
        assert lookup.data["student"]["email"] == "bob@x.edu"

    @pytest.mark.asyncio
    async def test_blank_roll_number_reported_by_api_name(self, execute, department_id):
        student = await add_student(execute, department_id)

        result = await execute(UPDATE_STUDENT, {"input": {"id": student["id"], "rollNumber": ""}})

        assert result.errors[0].message == "Field 'rollNumber' is required"

    @pytest.mark.asyncio
    async def test_update_missing_student_is_null(self, execute):
        result = await execute(UPDATE_STUDENT, {"input": {"id": str(uuid.uuid4()), "name": "X"}})

        assert result.errors is None
        assert result.data["updateStudent"] is None

    @pytest.mark.asyncio
    async def test_delete_returns_pre_delete_state(self, execute, department_id):
        student = await add_student(execute, department_id)

        result = await execute(
            "mutation Delete($id: ID!) { deleteStudent(id: $id) { id name email } }",
            {"id": student["id"]},
        )

        assert result.errors is None
        assert result.data["deleteStudent"] == {
            "id": student["id"],
            "name": "Anna",
            "email": "anna@x.edu",
        }

        lookup = await execute(GET_STUDENT, {"id": student["id"]})
        assert lookup.data["student"] is None

        again = await execute(
            "mutation Delete($id: ID!) { deleteStudent(id: $id) { id } }",
            {"id": student["id"]},
        )
        assert again.errors is None
        assert again.data["deleteStudent"] is None


class TestStudentTimestamps:
    @pytest.mark.asyncio
    async def test_timestamps_match_between_write_and_read(self, execute, department_id):
        created = await execute(
            "mutation Add($input: AddStudentInput!) { addStudent(input: $input) { id createdAt } }",
            {
                "input": {
                    "name": "Anna",
                    "email": "anna@x.edu",
                    "rollNumber": "CS001",
                    "departmentId": department_id,
                }
            },
        )
        student = created.data["addStudent"]

        updated = await execute(
            "mutation Update($input: UpdateStudentInput!) "
            "{ updateStudent(input: $input) { createdAt updatedAt } }",
            {"input": {"id": student["id"], "age": 20}},
        )
        lookup = await execute(
            "query Get($id: ID!) { student(id: $id) { createdAt updatedAt } }",
            {"id": student["id"]},
        )

        assert updated.data["updateStudent"]["createdAt"] == student["createdAt"]
        assert lookup.data["student"] == updated.data["updateStudent"]
        assert student["createdAt"].endswith("+00:00")


class TestStudentQueries:
    @pytest.mark.asyncio
    async def test_search_students(self, execute, department_id):
        await add_student(execute, department_id, name="Anna", email="a@x.edu", rollNumber="1")
        await add_student(execute, department_id, name="Ansh", email="b@x.edu", rollNumber="2")
        await add_student(execute, department_id, name="Bob", email="c@x.edu", rollNumber="3")

        result = await execute('{ searchStudents(name: "an") { name } }')

        assert result.errors is None
        assert sorted(s["name"] for s in result.data["searchStudents"]) == ["Anna", "Ansh"]

    @pytest.mark.asyncio
    async def test_students_by_department(self, execute, department_id):
        other = await execute(
            'mutation { addDepartment(input: {name: "Maths", code: "MA01", hod: "B"}) { id } }'
        )
        other_id = other.data["addDepartment"]["id"]
        await add_student(execute, department_id, email="a@x.edu", rollNumber="1")
        await add_student(execute, other_id, email="b@x.edu", rollNumber="2")

        query = "query ByDept($id: ID!) { studentsByDepartment(departmentId: $id) { rollNumber } }"
        result = await execute(query, {"id": department_id})
        empty = await execute(query, {"id": str(uuid.uuid4())})

        assert result.data["studentsByDepartment"] == [{"rollNumber": "1"}]
        assert empty.data["studentsByDepartment"] == []

    @pytest.mark.asyncio
    async def test_malformed_department_id(self, execute):
        result = await execute('{ studentsByDepartment(departmentId: "nope") { id } }')

        assert result.errors[0].message == "Invalid departmentId: 'nope'"

    @pytest.mark.asyncio
    async def test_students_lists_all(self, execute, department_id):
        await add_student(execute, department_id, email="a@x.edu", rollNumber="1")
        await add_student(execute, department_id, email="b@x.edu", rollNumber="2")

        result = await execute("{ students { rollNumber } }")

        assert {s["rollNumber"] for s in result.data["students"]} == {"1", "2"}


class TestStudentDepartmentField:
    @pytest.mark.asyncio
    async def test_dangling_reference_resolves_to_none(self, mock_info):
        student = Student(
            id=strawberry.ID(str(uuid.uuid4())),
            name="Ghost",
            email="ghost@x.edu",
            roll_number="0",
            age=None,
            phone=None,
            created_at=datetime.now(UTC),
            updated_at=datetime.now(UTC),
            department_id=uuid.uuid4(),
        )

        assert await resolve_student_department(student, mock_info) is None
