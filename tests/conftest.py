import json

import pulumi

from pulumi_mocks import MOCKS, PROJECT, REGION, STACK, TEST_AGENT_RUNTIME

pulumi.runtime.set_mocks(MOCKS, project=PROJECT, stack=STACK, preview=False)
pulumi.runtime.set_all_config({
    'aws:region': REGION,
    f'{PROJECT}:environment': STACK,
    f'{PROJECT}:agent_runtime': json.dumps(TEST_AGENT_RUNTIME),
})
