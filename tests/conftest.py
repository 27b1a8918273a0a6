"""
Shared sample data for reporting tests.

Hierarchy:
    Asha (Admin)
    Mona (Manager) <- Tara (Mentor) <- Ravi, Rita (Recruiters)
    Mike (Manager) <- Ram (Recruiter)

Jobs j1 (Acme, by Ravi), j2 (Globex, by Tara), j3 (unknown client, by Ram).
Timestamps are naive, i.e. already in the report timezone.
"""

import pytest

from schemas.records import Candidate, Client, Job, StaffUser

STAFF = [
    {"_id": "a", "name": "Asha", "designation": "Recruiter", "isAdmin": True},
    {"_id": "m", "name": "Mona", "designation": "Manager"},
    {"_id": "t", "name": "Tara", "designation": "Mentor", "reporter": {"_id": "m", "name": "Mona"}},
    {"_id": "r1", "name": "Ravi", "designation": "Recruiter", "reporterId": "t"},
    {"_id": "r2", "name": "Rita", "designation": "recruiter", "reporterId": "t"},
    {"_id": "m2", "name": "Mike", "designation": "Manager"},
    {"_id": "r3", "name": "Ram", "designation": "Recruiter", "reporterId": "m2"},
]

CLIENTS = [
    {"_id": "c1", "companyName": "Acme", "state": "Karnataka", "payoutOption": "Agreement Percentage",
     "agreementPercentage": 8.33},
    {"_id": "c2", "companyName": "Globex", "state": "Delhi", "payoutOption": "Flat Pay", "flatPayAmount": 50000},
]

JOBS = [
    {"_id": "j1", "title": "Backend Engineer", "clientId": {"_id": "c1"}, "CreatedBy": "r1",
     "assignedRecruiters": [{"_id": "r1"}], "noOfPositions": 3, "status": "Open",
     "createdAt": "2025-03-01T10:00:00"},
    {"_id": "j2", "title": "Data Analyst", "clientId": "c2", "CreatedBy": {"_id": "t"},
     "assignedRecruiters": ["r2"], "noOfPositions": "2", "status": "Closed",
     "createdAt": "2025-03-05T09:00:00"},
    {"_id": "j3", "title": "QA Lead", "clientId": "missing", "CreatedBy": "r3",
     "assignedRecruiters": ["r3"], "noOfPositions": 1, "status": "Open",
     "createdAt": "2025-02-20T09:00:00"},
]

CANDIDATES = [
    {"_id": "k1", "jobId": "j1", "createdBy": "r1", "status": "New",
     "createdAt": "2025-03-10T09:00:00"},
    {"_id": "k2", "jobId": "j1", "createdBy": "r1", "status": "Rejected",
     "statusHistory": [
         {"status": "New", "timestamp": "2025-03-02T09:00:00"},
         {"status": "Interviewed", "timestamp": "2025-03-05T11:00:00"},
         {"status": "Rejected", "timestamp": "2025-03-08T16:00:00"},
     ],
     "createdAt": "2025-03-02T09:00:00"},
    {"_id": "k3", "jobId": "j1", "createdBy": "r2", "status": "Rejected",
     "statusHistory": [
         {"status": "New", "timestamp": "2025-03-03T09:00:00"},
         {"status": "Rejected", "timestamp": "2025-03-04T10:00:00"},
     ],
     "createdAt": "2025-03-03T09:00:00"},
    {"_id": "k4", "jobId": "j1", "createdBy": "r1", "status": "Joined",
     "joiningDate": "2025-03-15",
     "statusHistory": [
         {"status": "Selected", "timestamp": "2025-03-12T10:00:00"},
         {"status": "Joined", "timestamp": "2025-03-14T10:00:00"},
     ],
     "createdAt": "2025-03-01T12:00:00"},
    {"_id": "k5", "jobId": "j2", "createdBy": "r2", "status": "Dropped", "droppedBy": "Client",
     "createdAt": "2025-03-06T10:00:00"},
    {"_id": "k6", "jobId": "j2", "createdBy": "r2", "status": "Screening",
     "createdAt": "2025-03-07T10:00:00"},
    {"_id": "k7", "jobId": "j3", "createdBy": "r3", "status": "Mystery",
     "createdAt": "2025-02-21T10:00:00"},
    {"_id": "k8", "jobId": "j3", "createdBy": "r3", "status": "Shortlisted",
     "createdAt": "2025-02-22T10:00:00"},
    {"_id": "k9", "jobId": "j1", "createdBy": "r3", "status": "Shortlisted",
     "createdAt": "2025-03-09T10:00:00"},
    {"_id": "k10", "jobId": "j2", "createdBy": "r2", "status": "Rejected", "rejectedBy": "Recruiter",
     "createdAt": "2025-03-06T12:00:00"},
]


@pytest.fixture
def raw_records():
    """Collaborator-shaped records (camelCase keys, populated references)."""
    return {
        "staff": [dict(s) for s in STAFF],
        "clients": [dict(c) for c in CLIENTS],
        "jobs": [dict(j) for j in JOBS],
        "candidates": [dict(c) for c in CANDIDATES],
    }


@pytest.fixture
def staff():
    return [StaffUser.model_validate(s) for s in STAFF]


@pytest.fixture
def clients():
    return [Client.model_validate(c) for c in CLIENTS]


@pytest.fixture
def jobs():
    return [Job.model_validate(j) for j in JOBS]


@pytest.fixture
def candidates():
    return [Candidate.model_validate(c) for c in CANDIDATES]


@pytest.fixture
def staff_by_id(staff):
    return {user.id: user for user in staff}
